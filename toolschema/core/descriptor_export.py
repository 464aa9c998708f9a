"""Descriptor Export: finite, JSON-serializable renderings of compiled descriptors.

Invariants:
    - Input descriptors are never mutated; every rendering is a fresh tree
    - Output is always finite: an edge back to an object still being rendered keeps
      its own scalar keys (type, description, default, ...) and loses only the
      recursive ones (properties, required, items, additionalProperties)
    - Only true cycles are cut; a subtree shared by two siblings is rendered twice
    - to_input_schema() output is valid JSON Schema for the Anthropic Messages API:
      no `optional` keyword, no "any" type

Design Decisions:
    - Compiled descriptors stay cyclic and shared (identity is what the cache guarantees);
      cycle cutting happens only here, at the serialization edge
    - A cut node keeps its `type` list, so a nullable self-reference still accepts null
    - "any" becomes an absent `type`: the empty schema already accepts every value
"""

import copy
from typing import Any

Descriptor = dict[str, Any]

_NESTED_KEYS = frozenset({"items", "additionalProperties"})
_RECURSIVE_KEYS = frozenset({"properties", "required", *_NESTED_KEYS})


def to_json_safe(descriptor: Descriptor) -> Descriptor:
    """Canonical descriptor keys kept (optional, "any"), cycles cut."""
    return _render(descriptor, strict=False, active=set())


def to_input_schema(descriptor: Descriptor) -> Descriptor:
    """JSON Schema rendering for a tool's `input_schema`."""
    return _render(descriptor, strict=True, active=set())


def _render(descriptor: Descriptor, *, strict: bool, active: set[int]) -> Descriptor:
    key = id(descriptor)
    if key in active:
        return _back_edge(descriptor, strict=strict)
    active.add(key)

    rendered: Descriptor = {}
    for name, value in descriptor.items():
        if name == "properties":
            rendered[name] = {
                prop: _render(child, strict=strict, active=active)
                for prop, child in value.items()
            }
        elif name in _NESTED_KEYS and isinstance(value, dict):
            rendered[name] = _render(value, strict=strict, active=active)
        elif _keep_scalar(name, value, strict):
            rendered[name] = copy.deepcopy(value)

    active.discard(key)
    return rendered


def _back_edge(descriptor: Descriptor, *, strict: bool) -> Descriptor:
    edge: Descriptor = {
        name: copy.deepcopy(value)
        for name, value in descriptor.items()
        if name not in _RECURSIVE_KEYS and _keep_scalar(name, value, strict)
    }
    edge.setdefault("type", "object")
    return edge


def _keep_scalar(name: str, value: Any, strict: bool) -> bool:
    if not strict:
        return True
    if name == "optional":
        return False
    return not (name == "type" and _is_any(value))


def _is_any(type_value: Any) -> bool:
    if isinstance(type_value, list):
        return "any" in type_value
    return type_value == "any"
