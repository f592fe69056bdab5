"""Interface packages, consumer bindings and resolution results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from botkit.definitions import ActionDefinition, ChannelDefinition, EntityDefinition, EventDefinition
from botkit.schema import Schema


@dataclass(slots=True)
class InterfaceDefinition:
    name: str
    version: str
    entities: dict[str, EntityDefinition] = field(default_factory=dict)
    actions: dict[str, ActionDefinition] = field(default_factory=dict)
    events: dict[str, EventDefinition] = field(default_factory=dict)
    channels: dict[str, ChannelDefinition] = field(default_factory=dict)


@dataclass(slots=True)
class InterfacePackage:
    name: str
    version: str
    definition: InterfaceDefinition


@dataclass(slots=True, frozen=True)
class NameRef:
    name: str


@dataclass(slots=True)
class EntityBinding:
    name: str
    schema: Schema


@dataclass(slots=True)
class InterfaceExtensionInput:
    """An interface package plus the consuming integration's bindings.

    `entities` binds each interface entity key to a concrete entity; the rename
    maps go from the interface's own action/event/channel name to the name used
    by the integration.
    """

    package: InterfacePackage
    entities: dict[str, EntityBinding]
    actions: dict[str, NameRef] = field(default_factory=dict)
    events: dict[str, NameRef] = field(default_factory=dict)
    channels: dict[str, NameRef] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.package.name

    @property
    def version(self) -> str:
        return self.package.version


@dataclass(slots=True)
class ResolvedInterface:
    actions: dict[str, ActionDefinition] = field(default_factory=dict)
    events: dict[str, EventDefinition] = field(default_factory=dict)
    channels: dict[str, ChannelDefinition] = field(default_factory=dict)


@dataclass(slots=True)
class InterfaceStatement:
    name: str
    version: str
    entities: dict[str, NameRef] = field(default_factory=dict)
    actions: dict[str, NameRef] = field(default_factory=dict)
    events: dict[str, NameRef] = field(default_factory=dict)
    channels: dict[str, NameRef] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        def names(items: dict[str, NameRef]) -> dict[str, dict[str, str]]:
            return {key: {"name": ref.name} for key, ref in items.items()}

        return {
            "name": self.name,
            "version": self.version,
            "entities": names(self.entities),
            "actions": names(self.actions),
            "events": names(self.events),
            "channels": names(self.channels),
        }


@dataclass(slots=True)
class InterfaceExtensionOutput:
    resolved: ResolvedInterface
    statement: InterfaceStatement
