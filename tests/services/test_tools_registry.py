"""Tools Registry tests: validation, duplicates, batches and Anthropic export.

Tests cover:
    - Valid tools register and are retrievable in registration order
    - Invalid names and permissions raise ToolValidationError naming the field
    - Duplicates raise DuplicateToolError, inside a batch and across calls
    - register_batch() is all-or-nothing
    - anthropic_tools() returns JSON-serializable ToolParams, subset order respected
    - Patterns come from Settings (environment overrides honored)
"""

import json
from typing import NotRequired, TypedDict

import pytest
from pydantic import BaseModel

from toolschema.config import Settings
from toolschema.core.errors import (
    DuplicateToolError,
    ResourceNotFoundError,
    ToolValidationError,
)
from toolschema.services.tool_config import ToolSchemaDefinition
from toolschema.services.tools_registry import ToolRegistry


class QueryArgs(TypedDict):
    query: str
    limit: NotRequired[int]


class Comment(BaseModel):
    """A comment in a thread."""
    body: str
    replies: list["Comment"] = []


def _tool(name: str, permissions=("kb:read",), schema=QueryArgs) -> ToolSchemaDefinition:
    return ToolSchemaDefinition(name, f"{name} tool", schema, list(permissions))


# ─── Registration ────────────────────────────────────────────────

def test_register_and_get():
    registry = ToolRegistry()
    config = registry.register(_tool("search_kb"))
    assert registry.get("search_kb") is config
    assert "search_kb" in registry
    assert len(registry) == 1


def test_registration_order_preserved():
    registry = ToolRegistry()
    for name in ("zeta", "alpha", "mid"):
        registry.register(_tool(name))
    assert registry.names() == ["zeta", "alpha", "mid"]
    assert [t.name for t in registry.tools()] == ["zeta", "alpha", "mid"]


def test_shared_schema_compiled_once():
    registry = ToolRegistry()
    first = registry.register(_tool("one"))
    second = registry.register(_tool("two"))
    assert first.parameters is second.parameters


def test_get_unknown_raises_not_found():
    with pytest.raises(ResourceNotFoundError) as exc_info:
        ToolRegistry().get("missing")
    assert exc_info.value.context.tool_name == "missing"


# ─── Validation ──────────────────────────────────────────────────

@pytest.mark.parametrize("name", ["", "has space", "dot.name", "x" * 65])
def test_invalid_names_rejected(name):
    registry = ToolRegistry()
    with pytest.raises(ToolValidationError) as exc_info:
        registry.register(_tool(name))
    assert exc_info.value.field == "name"
    assert len(registry) == 0


@pytest.mark.parametrize("permission", ["", "Upper", "kb:", "1kb", "kb read"])
def test_invalid_permissions_rejected(permission):
    with pytest.raises(ToolValidationError) as exc_info:
        ToolRegistry().register(_tool("search_kb", permissions=[permission]))
    assert exc_info.value.field == "required_permissions"
    assert exc_info.value.context.permission == permission


def test_valid_permission_forms_accepted():
    config = ToolRegistry().register(
        _tool("search_kb", permissions=["kb", "kb:read", "kb:read:*", "web_search"]),
    )
    assert config.required_permissions == ["kb", "kb:read", "kb:read:*", "web_search"]


def test_name_pattern_from_environment(monkeypatch):
    monkeypatch.setenv("TOOL_NAME_PATTERN", r"^ns_[a-z]+$")
    registry = ToolRegistry()
    registry.register(_tool("ns_search"))
    with pytest.raises(ToolValidationError):
        registry.register(_tool("search"))


def test_explicit_settings_override_environment():
    registry = ToolRegistry(settings=Settings(permission_pattern=r"^admin$"))
    registry.register(_tool("purge", permissions=["admin"]))
    with pytest.raises(ToolValidationError):
        registry.register(_tool("read", permissions=["kb:read"]))


# ─── Duplicates and batches ──────────────────────────────────────

def test_duplicate_name_rejected():
    registry = ToolRegistry()
    original = registry.register(_tool("search_kb"))
    with pytest.raises(DuplicateToolError) as exc_info:
        registry.register(_tool("search_kb", permissions=["other"]))
    assert exc_info.value.name == "search_kb"
    assert registry.get("search_kb") is original


def test_batch_registers_all():
    registry = ToolRegistry()
    configs = registry.register_batch([_tool("a"), _tool("b", schema=Comment)])
    assert [c.name for c in configs] == ["a", "b"]
    assert registry.names() == ["a", "b"]


def test_batch_with_duplicate_inside_registers_nothing():
    registry = ToolRegistry()
    with pytest.raises(DuplicateToolError):
        registry.register_batch([_tool("a"), _tool("b"), _tool("a")])
    assert len(registry) == 0


def test_batch_with_invalid_member_registers_nothing():
    registry = ToolRegistry()
    registry.register(_tool("existing"))
    with pytest.raises(ToolValidationError):
        registry.register_batch([_tool("fresh"), _tool("bad name")])
    assert registry.names() == ["existing"]


def test_batch_conflicting_with_registry_registers_nothing():
    registry = ToolRegistry()
    registry.register(_tool("existing"))
    with pytest.raises(DuplicateToolError):
        registry.register_batch([_tool("fresh"), _tool("existing")])
    assert "fresh" not in registry


# ─── Anthropic export ────────────────────────────────────────────

def test_anthropic_tools_serializable_for_cyclic_schema():
    registry = ToolRegistry()
    registry.register(_tool("post_comment", permissions=["thread:write"], schema=Comment))
    tools = registry.anthropic_tools()
    json.dumps(tools)
    schema = tools[0]["input_schema"]
    assert schema["type"] == "object"
    assert schema["required"] == ["body"]
    assert schema["properties"]["replies"]["items"] == {
        "type": "object", "description": "A comment in a thread.",
    }


def test_anthropic_tools_subset_in_requested_order():
    registry = ToolRegistry()
    registry.register_batch([_tool("a"), _tool("b"), _tool("c")])
    assert [t["name"] for t in registry.anthropic_tools(["c", "a"])] == ["c", "a"]


def test_anthropic_tools_unknown_name_raises():
    registry = ToolRegistry()
    registry.register(_tool("a"))
    with pytest.raises(ResourceNotFoundError):
        registry.anthropic_tools(["a", "missing"])


def test_registration_logged(caplog):
    registry = ToolRegistry()
    with caplog.at_level("INFO", logger="toolschema.services.tools_registry"):
        registry.register_batch([_tool("a"), _tool("b")])
    records = [r for r in caplog.records if r.name == "toolschema.services.tools_registry"]
    assert [getattr(r, "tool_name", None) for r in records[:2]] == ["a", "b"]
    assert records[-1].tool_count == 2
