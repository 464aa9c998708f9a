"""Wrapper Resolver: peels optional / nullable / default layers off a schema node.

Invariants:
    - Layers are unwrapped one at a time, in any order and to any depth
    - Optional, Default and Nullable layers all set is_optional
    - The first non-empty description met outer-to-inner wins; the base's own is the fallback
    - The outermost Default layer wins (it is the one applied at validation time).
      Inner defaults are never consulted, not even when the outer factory fails:
      no innermost-wins re-resolution per layer
    - A failing default factory never propagates: the field keeps has_default but no value

Design Decisions:
    - Default resolution returns an explicit DefaultResolution instead of try/except-and-discard,
      so "errors become absent data" is visible and testable
    - Resolved defaults pass through pydantic_core.to_jsonable_python: descriptors stay JSON-ready
    - Constraint metadata is collected from every layer: in pydantic, constraints sit beside
      the type (FieldInfo.metadata, Annotated extras), not on it
"""

from dataclasses import dataclass
from typing import Any, Callable

from pydantic_core import PydanticSerializationError, to_jsonable_python

from toolschema.core.schema_kinds import SchemaKind, SchemaView, classify


@dataclass(frozen=True)
class DefaultResolution:
    """Outcome of resolving one default: a value, or the error that prevented it."""
    ok: bool
    value: Any = None
    error: BaseException | None = None


@dataclass
class FieldAnalysis:
    """Accumulated wrapper semantics around one base schema node."""
    base_schema: Any
    base_view: SchemaView
    is_optional: bool = False
    is_nullable: bool = False
    has_default: bool = False
    default: DefaultResolution | None = None
    description: str | None = None
    constraints: tuple[Any, ...] = ()

    @property
    def has_resolved_default(self) -> bool:
        return self.default is not None and self.default.ok

    @property
    def default_value(self) -> Any:
        return self.default.value if self.has_resolved_default else None


def resolve_wrappers(node: Any) -> FieldAnalysis:
    """Unwrap every wrapper/carrier layer around `node` and return the analysis."""
    is_optional = False
    is_nullable = False
    default: DefaultResolution | None = None
    description: str | None = None
    constraints: list[Any] = []

    current = node
    view = classify(current)
    while view.is_wrapper:
        if description is None and view.description:
            description = view.description
        constraints.extend(view.constraints)

        if view.kind is SchemaKind.OPTIONAL:
            is_optional = True
        elif view.kind is SchemaKind.DEFAULT:
            is_optional = True
            if default is None:
                default = resolve_default(view)
        elif view.kind is SchemaKind.NULLABLE:
            is_optional = True
            is_nullable = True

        current = view.inner
        view = classify(current)

    if description is None and view.description:
        description = view.description

    return FieldAnalysis(
        base_schema=current,
        base_view=view,
        is_optional=is_optional,
        is_nullable=is_nullable,
        has_default=default is not None,
        default=default,
        description=description,
        constraints=tuple(constraints),
    )


def resolve_default(view: SchemaView) -> DefaultResolution:
    """Resolve a DEFAULT layer: the factory result if there is one, else the fixed value."""
    if view.default_factory is not None:
        return invoke_default_factory(view.default_factory)
    return jsonable_default(view.default)


def invoke_default_factory(factory: Callable[[], Any]) -> DefaultResolution:
    """Call a zero-argument default factory. Any exception becomes ok=False."""
    try:
        value = factory()
    except Exception as exc:
        return DefaultResolution(ok=False, error=exc)
    return jsonable_default(value)


def jsonable_default(value: Any) -> DefaultResolution:
    """Convert a default to JSON-ready data; unserializable values become ok=False."""
    try:
        return DefaultResolution(ok=True, value=to_jsonable_python(value))
    except (PydanticSerializationError, TypeError, ValueError) as exc:
        return DefaultResolution(ok=False, error=exc)
