"""Constraint Extractor: per-family translation of a base node into descriptor fields.

Invariants:
    - Never raises: unrecognized kinds compile to {"type": "any"}
    - Later constraint metadata overrides earlier metadata for the same key
    - min_length/max_length mean minLength/maxLength on strings, minItems/maxItems on arrays
    - Element and value types recurse through the caller-supplied describe_child

Design Decisions:
    - Explicit kind -> handler dict: every family visible in one place (ADR: ExMA no convention-over-config)
    - Constraints read by attribute name (min_length, ge, pattern, ...): annotated_types,
      StringConstraints and Field() metadata all expose the same names
    - OBJECT is not handled here: the SchemaWalker owns object expansion and its cache protocol
"""

import logging
from typing import Any, Callable, Iterable, Iterator

from pydantic_core import PydanticSerializationError, to_jsonable_python

from toolschema.core.errors import SchemaDegradation
from toolschema.core.schema_kinds import SchemaKind, SchemaView, json_type_of, node_label

logger = logging.getLogger(__name__)

Descriptor = dict[str, Any]
DescribeChild = Callable[[Any], Descriptor]

_LENGTH_KEYS = ("min_length", "max_length")
_STRING_KEYS = {"min_length": "minLength", "max_length": "maxLength"}
_ARRAY_KEYS = {"min_length": "minItems", "max_length": "maxItems"}
_NUMBER_KEYS = {
    "ge": "minimum",
    "gt": "exclusiveMinimum",
    "le": "maximum",
    "lt": "exclusiveMaximum",
}


def extract_descriptor(
    view: SchemaView, constraints: Iterable[Any], describe_child: DescribeChild,
) -> Descriptor:
    """Compile a non-object base view plus its constraint metadata into a descriptor."""
    handler = _HANDLERS.get(view.kind, _describe_unknown)
    return handler(view, tuple(constraints), describe_child)


# === Handlers per family ======================================================

def _describe_string(view: SchemaView, constraints: tuple, _child: DescribeChild) -> Descriptor:
    descriptor: Descriptor = {"type": "string"}
    if view.format:
        descriptor["format"] = view.format
    for name, value in _metadata_values(constraints, (*_LENGTH_KEYS, "pattern")):
        if name == "pattern":
            # Compiled patterns contribute their source text.
            descriptor["pattern"] = getattr(value, "pattern", value)
        else:
            descriptor[_STRING_KEYS[name]] = value
    return descriptor


def _describe_number(view: SchemaView, constraints: tuple, _child: DescribeChild) -> Descriptor:
    descriptor: Descriptor = {"type": "integer" if view.integer else "number"}
    for name, value in _metadata_values(constraints, tuple(_NUMBER_KEYS)):
        descriptor[_NUMBER_KEYS[name]] = value
    return descriptor


def _describe_boolean(_view: SchemaView, _constraints: tuple, _child: DescribeChild) -> Descriptor:
    return {"type": "boolean"}


def _describe_array(view: SchemaView, constraints: tuple, describe_child: DescribeChild) -> Descriptor:
    descriptor: Descriptor = {"type": "array", "items": describe_child(view.inner)}
    for name, value in _metadata_values(constraints, _LENGTH_KEYS):
        descriptor[_ARRAY_KEYS[name]] = value
    return descriptor


def _describe_enum(view: SchemaView, _constraints: tuple, _child: DescribeChild) -> Descriptor:
    members = _jsonable_members(view.members)
    json_type = _enum_type(members)
    descriptor: Descriptor = {}
    if json_type is not None:
        descriptor["type"] = json_type
    descriptor["enum"] = members
    return descriptor


def _describe_literal(view: SchemaView, _constraints: tuple, _child: DescribeChild) -> Descriptor:
    value = _jsonable_members(view.members)[0]
    descriptor: Descriptor = {"const": value}
    json_type = json_type_of(value)
    if json_type is not None:
        descriptor["type"] = json_type
    return descriptor


def _describe_record(view: SchemaView, _constraints: tuple, describe_child: DescribeChild) -> Descriptor:
    return {"type": "object", "additionalProperties": describe_child(view.inner)}


def _describe_unknown(view: SchemaView, _constraints: tuple, _child: DescribeChild) -> Descriptor:
    logger.debug(
        "Unsupported schema shape compiled as 'any'",
        extra={
            "schema": node_label(view.node),
            "degradation": SchemaDegradation.UNSUPPORTED_SHAPE.value,
        },
    )
    return {"type": "any"}


_HANDLERS: dict[SchemaKind, Callable[[SchemaView, tuple, DescribeChild], Descriptor]] = {
    SchemaKind.STRING: _describe_string,
    SchemaKind.NUMBER: _describe_number,
    SchemaKind.BOOLEAN: _describe_boolean,
    SchemaKind.ARRAY: _describe_array,
    SchemaKind.ENUM: _describe_enum,
    SchemaKind.LITERAL: _describe_literal,
    SchemaKind.RECORD: _describe_record,
}


# === Helpers ==================================================================

def _metadata_values(constraints: tuple, names: tuple[str, ...]) -> Iterator[tuple[str, Any]]:
    """Yield (name, value) for every set constraint attribute, in metadata order."""
    for item in constraints:
        for name in names:
            value = getattr(item, name, None)
            if value is not None:
                yield name, value


def _jsonable_members(members: tuple[Any, ...]) -> list[Any]:
    try:
        return to_jsonable_python(list(members))
    except PydanticSerializationError:
        return list(members)


def _enum_type(members: list[Any]) -> str | None:
    types = {json_type_of(member) for member in members}
    if types and types <= {"integer", "number"}:
        return "number" if "number" in types else "integer"
    if len(types) == 1:
        return types.pop()
    return None
