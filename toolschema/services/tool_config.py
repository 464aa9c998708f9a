"""Tool Config Builder: assembles tool descriptors from a name, description and schema.

Invariants:
    - build_tool_config() performs no validation of name or permissions (registry's job)
    - `parameters` is the compiled descriptor itself, shared with the walker's cache
    - Building never raises for a schema shape: the compiler degrades instead
    - to_dict() and to_anthropic_tool() are finite and JSON-serializable, cycles included

Design Decisions:
    - Frozen dataclass over pydantic model: validating `parameters` would copy the dict and
      break the identity the cache guarantees
    - Wire form keeps the camelCase `requiredPermissions` key consumed by downstream
      config and documentation generators
    - to_anthropic_tool() emits the Messages API ToolParam shape (name, description, input_schema)
"""

from dataclasses import dataclass, field
from typing import Any, Iterable

from anthropic.types import ToolParam

from toolschema.core.descriptor_export import to_input_schema, to_json_safe
from toolschema.core.schema_walker import SchemaWalker, get_default_walker


@dataclass(frozen=True)
class ToolConfiguration:
    """Compiled, advertisable description of one callable tool."""
    name: str
    description: str
    parameters: dict[str, Any]
    required_permissions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": to_json_safe(self.parameters),
            "requiredPermissions": list(self.required_permissions),
        }

    def to_anthropic_tool(self) -> ToolParam:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": to_input_schema(self.parameters),
        }


@dataclass(frozen=True)
class ToolSchemaDefinition:
    """Source record of one tool: its parameters are a pydantic model or TypedDict."""
    name: str
    description: str
    parameters_schema: Any
    required_permissions: list[str] = field(default_factory=list)


def build_tool_config(
    name: str,
    description: str,
    parameters_schema: Any,
    required_permissions: Iterable[str],
    *,
    walker: SchemaWalker | None = None,
) -> ToolConfiguration:
    """Compile `parameters_schema` and assemble the tool descriptor."""
    walker = walker or get_default_walker()
    return ToolConfiguration(
        name=name,
        description=description,
        parameters=walker.compile_object(parameters_schema),
        required_permissions=list(required_permissions),
    )


def build_tool_configs(
    definitions: Iterable[ToolSchemaDefinition],
    *,
    walker: SchemaWalker | None = None,
) -> list[ToolConfiguration]:
    """Build one configuration per definition, in order."""
    return [
        build_tool_config(
            definition.name,
            definition.description,
            definition.parameters_schema,
            definition.required_permissions,
            walker=walker,
        )
        for definition in definitions
    ]
