"""Tools Registry: validated, name-indexed store of compiled tool configurations.

Invariants:
    - Tool names match settings.tool_name_pattern and are unique across the registry
    - Every permission matches settings.permission_pattern
    - register_batch() validates the whole batch before compiling any member:
      a failure registers nothing
    - Registration order is preserved by names(), tools() and anthropic_tools()

Design Decisions:
    - Validation lives here, not in build_tool_config(): the compiler stays total,
      the registry is the boundary that may refuse a definition
    - Explicit registration calls, no auto-discovery of define_*_tools modules
      (ADR: ExMA no convention-over-config)
    - Registry owns a SchemaWalker: schemas shared across its tools compile once
"""

import logging
import re
from typing import Iterable

from anthropic.types import ToolParam

from toolschema.config import Settings, get_settings
from toolschema.core.errors import (
    DuplicateToolError,
    ErrorContext,
    ResourceNotFoundError,
    ToolValidationError,
)
from toolschema.core.schema_walker import SchemaWalker
from toolschema.services.tool_config import (
    ToolConfiguration,
    ToolSchemaDefinition,
    build_tool_config,
)

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Name -> ToolConfiguration, filled once at startup."""

    def __init__(
        self, walker: SchemaWalker | None = None, settings: Settings | None = None,
    ):
        self._walker = walker or SchemaWalker()
        settings = settings or get_settings()
        self._name_pattern = re.compile(settings.tool_name_pattern)
        self._permission_pattern = re.compile(settings.permission_pattern)
        self._tools: dict[str, ToolConfiguration] = {}

    @property
    def walker(self) -> SchemaWalker:
        return self._walker

    def register(self, definition: ToolSchemaDefinition) -> ToolConfiguration:
        """Validate, compile and store one tool definition."""
        self._validate(definition)
        if definition.name in self._tools:
            raise DuplicateToolError(definition.name)
        return self._store(definition)

    def register_batch(
        self, definitions: Iterable[ToolSchemaDefinition],
    ) -> list[ToolConfiguration]:
        """Register a batch atomically: every member validated before any is stored."""
        batch = list(definitions)
        seen: set[str] = set()
        for definition in batch:
            self._validate(definition)
            if definition.name in self._tools or definition.name in seen:
                raise DuplicateToolError(definition.name)
            seen.add(definition.name)
        configs = [self._store(definition) for definition in batch]
        logger.info("Registered tool batch", extra={"tool_count": len(configs)})
        return configs

    def get(self, name: str) -> ToolConfiguration:
        tool = self._tools.get(name)
        if tool is None:
            raise ResourceNotFoundError("Tool", name, ErrorContext(tool_name=name))
        return tool

    def names(self) -> list[str]:
        return list(self._tools)

    def tools(self) -> list[ToolConfiguration]:
        return list(self._tools.values())

    def anthropic_tools(self, names: Iterable[str] | None = None) -> list[ToolParam]:
        """Messages API `tools` payload, for all tools or the named subset (in that order)."""
        selected = self.tools() if names is None else [self.get(n) for n in names]
        return [tool.to_anthropic_tool() for tool in selected]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    # === Internal ==============================================================

    def _validate(self, definition: ToolSchemaDefinition) -> None:
        name = definition.name
        if not isinstance(name, str) or not self._name_pattern.fullmatch(name):
            raise ToolValidationError(
                f"Invalid tool name {name!r}: must match {self._name_pattern.pattern}",
                field="name",
                context=ErrorContext(tool_name=str(name)),
            )
        for permission in definition.required_permissions:
            if not isinstance(permission, str) or not self._permission_pattern.fullmatch(permission):
                raise ToolValidationError(
                    f"Invalid permission {permission!r} on tool '{name}'",
                    field="required_permissions",
                    context=ErrorContext(tool_name=name, permission=str(permission)),
                )

    def _store(self, definition: ToolSchemaDefinition) -> ToolConfiguration:
        config = build_tool_config(
            definition.name,
            definition.description,
            definition.parameters_schema,
            definition.required_permissions,
            walker=self._walker,
        )
        self._tools[config.name] = config
        logger.info("Registered tool", extra={"tool_name": config.name})
        return config
