"""Constraint Extractor: tests for per-family descriptor fields.

Tests cover:
    - Strings: length bounds, pattern, format
    - Numbers: integer vs number, inclusive and exclusive bounds
    - Arrays: items recursion, item-count bounds
    - Enums and literals: member values, inferred type
    - Records: additionalProperties
    - Unknown shapes compile to {"type": "any"}
"""

import re
import uuid
from enum import Enum, IntEnum
from types import SimpleNamespace
from typing import Annotated, Any, Literal

from annotated_types import Gt, Len, Lt
from pydantic import Field, conint, constr

from toolschema.core.extract_constraints import extract_descriptor
from toolschema.core.schema_kinds import classify
from toolschema.core.schema_walker import SchemaWalker


class Shape(str, Enum):
    CIRCLE = "circle"
    SQUARE = "square"


class Level(IntEnum):
    LOW = 1
    HIGH = 2


def _describe(node):
    return SchemaWalker().describe_field(node)


def _children(node):
    return {"type": "child"}


# ─── Strings ─────────────────────────────────────────────────────

def test_string_length_bounds():
    node = Annotated[str, Field(min_length=3, max_length=10)]
    assert _describe(node) == {"type": "string", "minLength": 3, "maxLength": 10}


def test_constr_bounds_and_pattern():
    assert _describe(constr(min_length=1, pattern=r"^[a-z]+$")) == {
        "type": "string", "minLength": 1, "pattern": r"^[a-z]+$",
    }


def test_compiled_pattern_contributes_source():
    constraint = SimpleNamespace(pattern=re.compile(r"\d+"))
    descriptor = extract_descriptor(classify(str), (constraint,), _children)
    assert descriptor == {"type": "string", "pattern": r"\d+"}


def test_exact_length():
    assert _describe(Annotated[str, Len(4, 4)]) == {
        "type": "string", "minLength": 4, "maxLength": 4,
    }


def test_later_constraint_overrides_earlier():
    node = Annotated[str, Field(max_length=5), Field(max_length=8)]
    assert _describe(node)["maxLength"] == 8


def test_string_format():
    assert _describe(uuid.UUID) == {"type": "string", "format": "uuid"}


# ─── Numbers ─────────────────────────────────────────────────────

def test_int_with_ge_is_integer_with_minimum():
    assert _describe(Annotated[int, Field(ge=0)]) == {"type": "integer", "minimum": 0}


def test_conint_bounds():
    assert _describe(conint(ge=1, le=100)) == {
        "type": "integer", "minimum": 1, "maximum": 100,
    }


def test_exclusive_bounds():
    assert _describe(Annotated[float, Gt(0), Lt(1)]) == {
        "type": "number", "exclusiveMinimum": 0, "exclusiveMaximum": 1,
    }


def test_plain_float_is_number():
    assert _describe(float) == {"type": "number"}


# ─── Arrays ──────────────────────────────────────────────────────

def test_array_items_recurse_through_child():
    descriptor = extract_descriptor(classify(list[int]), (), _children)
    assert descriptor == {"type": "array", "items": {"type": "child"}}


def test_array_item_bounds():
    node = Annotated[list[str], Field(min_length=1, max_length=3)]
    assert _describe(node) == {
        "type": "array", "items": {"type": "string"}, "minItems": 1, "maxItems": 3,
    }


def test_array_of_constrained_items():
    node = list[Annotated[int, Field(gt=0)]]
    assert _describe(node)["items"] == {"type": "integer", "exclusiveMinimum": 0}


# ─── Enums and literals ──────────────────────────────────────────

def test_string_enum():
    assert _describe(Shape) == {"type": "string", "enum": ["circle", "square"]}


def test_int_enum_type_inferred():
    assert _describe(Level) == {"type": "integer", "enum": [1, 2]}


def test_literal_enum():
    assert _describe(Literal["csv", "json"]) == {"type": "string", "enum": ["csv", "json"]}


def test_mixed_numeric_enum_is_number():
    assert _describe(Literal[1, 2.5])["type"] == "number"


def test_mixed_enum_has_no_type():
    assert _describe(Literal["a", 1]) == {"enum": ["a", 1]}


def test_single_literal_is_const():
    assert _describe(Literal["fixed"]) == {"const": "fixed", "type": "string"}
    assert _describe(Literal[3]) == {"const": 3, "type": "integer"}


# ─── Records and unknowns ────────────────────────────────────────

def test_record_value_type():
    assert _describe(dict[str, int]) == {
        "type": "object", "additionalProperties": {"type": "integer"},
    }


def test_unknown_shapes_are_any():
    assert _describe(bytes) == {"type": "any"}
    assert _describe(tuple[int, str]) == {"type": "any"}
    assert _describe(int | str) == {"type": "any"}


def test_bare_list_items_are_any():
    assert _describe(list) == {"type": "array", "items": {"type": "any"}}
    assert _describe(list[Any]) == {"type": "array", "items": {"type": "any"}}
