"""Schema Kinds: a closed tagged-union view over pydantic and typing schema nodes.

Invariants:
    - classify() is total: every input maps to exactly one SchemaKind, UNKNOWN included
    - Only public introspection is used (typing.get_origin/get_args, FieldInfo attributes,
      model_fields, TypedDict hints): no pydantic-private fields
    - Wrapper and carrier kinds always expose the wrapped node in `inner`

Design Decisions:
    - Closed visitor over a tagged union instead of reflective getattr chains: the compiler
      switches on SchemaKind and stays stable across pydantic releases
    - NotRequired is the optional layer, `X | None` the nullable layer, a FieldInfo (bare or
      inside Annotated) with a default or default_factory the default layer
    - FieldInfo / Annotated without a default are METADATA carriers: they add a description
      and constraint metadata but no optional/nullable/default semantics
    - Format types (EmailStr, AnyUrl, UUID, datetime) belong to the string family
"""

import collections.abc
import datetime
import decimal
import enum
import inspect
import logging
import types
import uuid
from dataclasses import dataclass
from typing import (
    Annotated, Any, Callable, Literal, NotRequired, Required, Union,
    get_args, get_origin, get_type_hints,
)

from pydantic import AnyUrl, BaseModel, EmailStr
from pydantic.fields import FieldInfo
from pydantic_core import PydanticUndefined
from typing_extensions import is_typeddict

logger = logging.getLogger(__name__)


class SchemaKind(str, enum.Enum):
    """Every shape the compiler distinguishes."""
    # Base families
    OBJECT = "object"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    ENUM = "enum"
    LITERAL = "literal"
    RECORD = "record"
    # Layers around a base
    OPTIONAL = "optional"
    NULLABLE = "nullable"
    DEFAULT = "default"
    METADATA = "metadata"
    # Everything else
    UNKNOWN = "unknown"


WRAPPER_KINDS = frozenset({
    SchemaKind.OPTIONAL, SchemaKind.NULLABLE,
    SchemaKind.DEFAULT, SchemaKind.METADATA,
})

_ARRAY_ORIGINS = frozenset({
    list, set, frozenset,
    collections.abc.Sequence, collections.abc.MutableSequence,
    collections.abc.Set, collections.abc.MutableSet,
})
_RECORD_ORIGINS = frozenset({
    dict, collections.abc.Mapping, collections.abc.MutableMapping,
})
_UNION_ORIGINS = (Union, types.UnionType)

_STRING_FORMATS: dict[type, str] = {
    EmailStr: "email",
    uuid.UUID: "uuid",
    datetime.datetime: "date-time",
    datetime.date: "date",
    datetime.time: "time",
}


@dataclass(frozen=True)
class SchemaView:
    """One node seen through the tagged union.

    `inner` is the wrapped node for wrapper/carrier kinds, the element node for
    ARRAY and the value node for RECORD.
    """
    kind: SchemaKind
    node: Any
    inner: Any = None
    description: str | None = None
    constraints: tuple[Any, ...] = ()
    default: Any = PydanticUndefined
    default_factory: Callable[[], Any] | None = None
    members: tuple[Any, ...] = ()
    format: str | None = None
    integer: bool = False

    @property
    def is_wrapper(self) -> bool:
        return self.kind in WRAPPER_KINDS


# === Public API ===============================================================

def classify(node: Any) -> SchemaView:
    """Map any schema node onto its SchemaView. Never raises."""
    if isinstance(node, FieldInfo):
        return _field_info_view(node, node, node.annotation)
    origin = get_origin(node)
    if origin is not None:
        return _generic_view(node, origin, get_args(node))
    if node is None or node is types.NoneType:
        return SchemaView(SchemaKind.LITERAL, node, members=(None,))
    if isinstance(node, type):
        return _class_view(node)
    return SchemaView(SchemaKind.UNKNOWN, node)


def object_fields(schema: Any) -> list[tuple[str, Any]]:
    """Named field nodes of an OBJECT-kind schema, in declaration order.

    Pydantic models yield their FieldInfo (keyed by alias when set). TypedDict keys
    that are optional through `total=False` are wrapped in NotRequired so the
    optional layer lives on the node itself.
    """
    if _is_subclass(schema, BaseModel):
        return [
            (info.alias or name, info)
            for name, info in schema.model_fields.items()
        ]
    if is_typeddict(schema):
        return _typed_dict_fields(schema)
    return []


def node_label(node: Any) -> str:
    """Short human-readable name of a node for log records."""
    if isinstance(node, type):
        return node.__qualname__
    return repr(node)


def json_type_of(value: Any) -> str | None:
    """JSON type name of a runtime value, None when it has no JSON counterpart."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, str):
        return "string"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return None


# === Internal: views per node shape ===========================================

def _field_info_view(node: Any, info: FieldInfo, inner: Any) -> SchemaView:
    return SchemaView(
        SchemaKind.DEFAULT if _has_default(info) else SchemaKind.METADATA,
        node,
        inner=inner,
        description=info.description or None,
        constraints=tuple(info.metadata),
        default=info.default,
        default_factory=info.default_factory,
    )


def _annotated_view(node: Any, inner: Any, metadata: tuple[Any, ...]) -> SchemaView:
    # Later Field(...) entries override earlier ones, as pydantic merges them.
    constraints: list[Any] = []
    description: str | None = None
    default_info: FieldInfo | None = None
    for item in metadata:
        if isinstance(item, FieldInfo):
            constraints.extend(item.metadata)
            description = item.description or description
            if _has_default(item):
                default_info = item
        else:
            constraints.append(item)
    if default_info is None:
        return SchemaView(
            SchemaKind.METADATA, node, inner=inner,
            description=description, constraints=tuple(constraints),
        )
    return SchemaView(
        SchemaKind.DEFAULT, node, inner=inner,
        description=description, constraints=tuple(constraints),
        default=default_info.default,
        default_factory=default_info.default_factory,
    )


def _generic_view(node: Any, origin: Any, args: tuple[Any, ...]) -> SchemaView:
    if origin is Annotated:
        return _annotated_view(node, args[0], args[1:])
    if origin is NotRequired:
        return SchemaView(SchemaKind.OPTIONAL, node, inner=args[0])
    if origin is Required:
        return SchemaView(SchemaKind.METADATA, node, inner=args[0])
    if origin in _UNION_ORIGINS:
        return _union_view(node, args)
    if origin is Literal:
        values = tuple(_literal_value(arg) for arg in args)
        if len(values) == 1:
            return SchemaView(SchemaKind.LITERAL, node, members=values)
        return SchemaView(SchemaKind.ENUM, node, members=values)
    if origin in _ARRAY_ORIGINS:
        return SchemaView(SchemaKind.ARRAY, node, inner=args[0] if args else Any)
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return SchemaView(SchemaKind.ARRAY, node, inner=args[0])
        return SchemaView(SchemaKind.UNKNOWN, node)
    if origin in _RECORD_ORIGINS:
        return SchemaView(SchemaKind.RECORD, node, inner=args[1] if len(args) == 2 else Any)
    return SchemaView(SchemaKind.UNKNOWN, node)


def _union_view(node: Any, args: tuple[Any, ...]) -> SchemaView:
    members = tuple(arg for arg in args if arg is not types.NoneType and arg is not None)
    if len(members) == len(args) or not members:
        return SchemaView(SchemaKind.UNKNOWN, node)
    inner = members[0] if len(members) == 1 else Union[members]
    return SchemaView(SchemaKind.NULLABLE, node, inner=inner)


def _class_view(cls: type) -> SchemaView:
    if _is_subclass(cls, BaseModel) or is_typeddict(cls):
        return SchemaView(SchemaKind.OBJECT, cls, description=_docstring(cls))
    if _is_subclass(cls, enum.Enum):
        return SchemaView(
            SchemaKind.ENUM, cls, members=tuple(member.value for member in cls),
        )
    if cls is bool:
        return SchemaView(SchemaKind.BOOLEAN, cls)
    fmt = _STRING_FORMATS.get(cls)
    if fmt is None and _is_subclass(cls, AnyUrl):
        fmt = "uri"
    if fmt is not None:
        return SchemaView(SchemaKind.STRING, cls, format=fmt)
    if _is_subclass(cls, str):
        return SchemaView(SchemaKind.STRING, cls)
    if _is_subclass(cls, int):
        return SchemaView(SchemaKind.NUMBER, cls, integer=True)
    if _is_subclass(cls, (float, decimal.Decimal)):
        return SchemaView(SchemaKind.NUMBER, cls)
    if cls in (list, set, frozenset, tuple):
        return SchemaView(SchemaKind.ARRAY, cls, inner=Any)
    if cls is dict:
        return SchemaView(SchemaKind.RECORD, cls, inner=Any)
    return SchemaView(SchemaKind.UNKNOWN, cls)


def _typed_dict_fields(schema: Any) -> list[tuple[str, Any]]:
    try:
        hints = get_type_hints(schema, include_extras=True)
    except Exception as exc:
        # Unresolvable annotations (NameError, AttributeError, ...): keep the fields,
        # compile the unresolved ones as unknown.
        logger.debug(
            "TypedDict hints unresolved: %s", exc,
            extra={"schema": node_label(schema)},
        )
        hints = dict(getattr(schema, "__annotations__", {}))
    optional_keys = getattr(schema, "__optional_keys__", frozenset())
    fields = []
    for name, hint in hints.items():
        if name in optional_keys and get_origin(hint) is not NotRequired:
            hint = NotRequired[hint]
        fields.append((name, hint))
    return fields


# === Internal: helpers ========================================================

def _has_default(info: FieldInfo) -> bool:
    return info.default is not PydanticUndefined or info.default_factory is not None


def _literal_value(value: Any) -> Any:
    return value.value if isinstance(value, enum.Enum) else value


def _docstring(cls: type) -> str | None:
    doc = cls.__dict__.get("__doc__")
    return inspect.cleandoc(doc) if doc else None


def _is_subclass(node: Any, parent: type | tuple[type, ...]) -> bool:
    try:
        return isinstance(node, type) and issubclass(node, parent)
    except TypeError:
        return False
