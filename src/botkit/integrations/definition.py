"""Local integration definition."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from botkit.definitions import (
    ActionDefinition,
    ChannelDefinition,
    EntityDefinition,
    EventDefinition,
    StateDefinition,
)
from botkit.errors import DefinitionError
from botkit.interfaces.resolve import resolve_interface
from botkit.interfaces.types import InterfaceExtensionInput, InterfaceStatement
from botkit.schema import Schema


@dataclass(slots=True)
class ConfigurationDefinition:
    schema: Schema
    title: str | None = None
    description: str | None = None
    identifier: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class IntegrationDefinition:
    name: str
    version: str
    title: str | None = None
    description: str | None = None
    icon: str | None = None
    readme: str | None = None
    user: dict[str, Any] = field(default_factory=dict)
    identifier: dict[str, Any] = field(default_factory=dict)
    configuration: ConfigurationDefinition | None = None
    configurations: dict[str, ConfigurationDefinition] = field(default_factory=dict)
    events: dict[str, EventDefinition] = field(default_factory=dict)
    actions: dict[str, ActionDefinition] = field(default_factory=dict)
    channels: dict[str, ChannelDefinition] = field(default_factory=dict)
    states: dict[str, StateDefinition] = field(default_factory=dict)
    entities: dict[str, EntityDefinition] = field(default_factory=dict)
    attributes: dict[str, str] = field(default_factory=dict)
    interfaces: dict[str, InterfaceStatement] = field(default_factory=dict)
    extra_operations: dict[str, Any] | None = None

    def extend(self, intrface: InterfaceExtensionInput) -> IntegrationDefinition:
        """Add an interface's resolved actions, events and channels to this integration."""
        output = resolve_interface(intrface)
        resolved = output.resolved
        for kind, target, items in (
            ("action", self.actions, resolved.actions),
            ("event", self.events, resolved.events),
            ("channel", self.channels, resolved.channels),
        ):
            for name in items:
                if name in target:
                    raise DefinitionError(
                        f"interface {intrface.name} {kind} '{name}' collides with "
                        f"an existing {kind} of {self.name}"
                    )
        self.actions.update(resolved.actions)
        self.events.update(resolved.events)
        self.channels.update(resolved.channels)
        self.interfaces[intrface.name] = output.statement
        return self
