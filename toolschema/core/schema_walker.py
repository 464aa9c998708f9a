"""Schema Walker: compiles object schemas field by field into parameter descriptors.

Invariants:
    - compile_object() inserts its placeholder in the cache BEFORE walking any field.
      Reordering this reintroduces infinite recursion on self-referential schemas.
    - The placeholder is the returned descriptor: `properties` and `required` are allocated
      in it and filled in place, so early references (cycles, shallow copies) see the result
    - `required` lists exactly the fields whose analysis is not optional, in declaration order
    - A field that adds nothing to its base returns the base descriptor itself, so a nested
      reference to an object is the very object compiled at top level
    - Nullable merging never removes or duplicates "null" in `type`
    - Never raises for a schema shape

Design Decisions:
    - One walker owns one DescriptionCache; the module-level default walker serves the
      process (schemas are static module constants)
    - Base descriptors are cached under the base node only when no constraint metadata
      applied to them: `str` alone and `str` with min_length=3 are different descriptors
    - Field descriptors are cached under the field node: the node carries its own metadata
"""

import logging
from typing import Any

from toolschema.core.description_cache import DescriptionCache
from toolschema.core.errors import SchemaDegradation
from toolschema.core.extract_constraints import extract_descriptor
from toolschema.core.resolve_wrappers import FieldAnalysis, resolve_wrappers
from toolschema.core.schema_kinds import SchemaKind, classify, node_label, object_fields

logger = logging.getLogger(__name__)

Descriptor = dict[str, Any]


class SchemaWalker:
    """Compiles schema nodes into descriptors, memoized per node identity."""

    def __init__(self, cache: DescriptionCache | None = None):
        self._cache = cache if cache is not None else DescriptionCache()

    @property
    def cache(self) -> DescriptionCache:
        return self._cache

    def compile_object(self, schema: Any) -> Descriptor:
        """Compile an object schema. Non-object input yields an empty object descriptor."""
        view = classify(schema)
        if view.kind is not SchemaKind.OBJECT:
            logger.debug(
                "Parameters schema is not an object; compiled as empty object",
                extra={
                    "schema": node_label(schema),
                    "degradation": SchemaDegradation.UNSUPPORTED_SHAPE.value,
                },
            )
            # Not cached: the same node may still be compiled as a field elsewhere.
            return {"type": "object", "properties": {}}

        cached = self._cache.get(schema)
        if cached is not None:
            return cached

        properties: dict[str, Descriptor] = {}
        required: list[str] = []
        descriptor: Descriptor = {"type": "object"}
        if view.description:
            descriptor["description"] = view.description
        descriptor["properties"] = properties
        descriptor["required"] = required

        # Placeholder first: a field that leads back here finds this same dict.
        self._cache.set(schema, descriptor)

        for name, field_node in object_fields(schema):
            analysis = resolve_wrappers(field_node)
            properties[name] = self.describe_field(field_node, analysis)
            if not analysis.is_optional:
                required.append(name)

        return descriptor

    def describe_field(self, node: Any, analysis: FieldAnalysis | None = None) -> Descriptor:
        """Compile one field node: its base plus description, default, nullability, optionality."""
        cached = self._cache.get(node)
        if cached is not None:
            return cached

        if analysis is None:
            analysis = resolve_wrappers(node)
        base = self.describe_base(analysis)

        if not _adds_to_base(analysis, base):
            descriptor = base
        else:
            descriptor = dict(base)
            if analysis.description:
                descriptor["description"] = analysis.description
            if analysis.has_default:
                if analysis.has_resolved_default:
                    descriptor["default"] = analysis.default_value
                else:
                    logger.debug(
                        "Default could not be resolved; omitted",
                        extra={
                            "schema": node_label(node),
                            "degradation": SchemaDegradation.DEFAULT_FACTORY_FAILURE.value,
                        },
                    )
            if analysis.is_nullable:
                descriptor["type"] = merge_null_type(descriptor.get("type"))
            if analysis.is_optional:
                descriptor["optional"] = True

        self._cache.set(node, descriptor)
        return descriptor

    def describe_base(self, analysis: FieldAnalysis) -> Descriptor:
        """Compile the innermost node of an analysis, honoring its constraint metadata."""
        base = analysis.base_schema
        if analysis.base_view.kind is SchemaKind.OBJECT:
            return self.compile_object(base)

        if not analysis.constraints:
            cached = self._cache.get(base)
            if cached is not None:
                return cached

        descriptor = extract_descriptor(
            analysis.base_view, analysis.constraints, self.describe_field,
        )
        if not analysis.constraints:
            self._cache.set(base, descriptor)
        return descriptor


def merge_null_type(type_value: Any) -> str | list[str]:
    """Add "null" to a descriptor `type`, promoting a scalar type to a list."""
    if isinstance(type_value, list):
        return type_value if "null" in type_value else [*type_value, "null"]
    if type_value is None:
        return ["null"]
    if type_value == "null":
        return type_value
    return [type_value, "null"]


def _adds_to_base(analysis: FieldAnalysis, base: Descriptor) -> bool:
    return (
        analysis.is_optional
        or analysis.is_nullable
        or analysis.has_default
        or bool(analysis.description and analysis.description != base.get("description"))
    )


# ─── Process-wide walker ────────────────────────────────────────

_default_walker = SchemaWalker()


def get_default_walker() -> SchemaWalker:
    return _default_walker


def compile_parameters(schema: Any) -> Descriptor:
    """Compile an object schema with the process-wide walker."""
    return _default_walker.compile_object(schema)
