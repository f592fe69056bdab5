"""Building blocks shared by integration and interface definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from botkit.schema import Schema


@dataclass(slots=True)
class SchemaDefinition:
    schema: Schema


@dataclass(slots=True)
class ActionDefinition:
    input: SchemaDefinition
    output: SchemaDefinition
    title: str | None = None
    description: str | None = None
    billable: bool | None = None
    cacheable: bool | None = None
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class EventDefinition:
    schema: Schema
    title: str | None = None
    description: str | None = None
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class MessageDefinition:
    schema: Schema


@dataclass(slots=True)
class ChannelDefinition:
    messages: dict[str, MessageDefinition]
    title: str | None = None
    description: str | None = None
    message_tags: dict[str, dict[str, Any]] = field(default_factory=dict)
    conversation_tags: dict[str, dict[str, Any]] = field(default_factory=dict)


@dataclass(slots=True)
class EntityDefinition:
    schema: Schema
    title: str | None = None
    description: str | None = None


@dataclass(slots=True)
class StateDefinition:
    type: str
    schema: Schema
