"""Instantiate an interface against a consumer's entities and names."""

from __future__ import annotations

from dataclasses import replace
from typing import TypeVar

from botkit.errors import DefinitionError
from botkit.interfaces.types import (
    InterfaceExtensionInput,
    InterfaceExtensionOutput,
    InterfaceStatement,
    NameRef,
    ResolvedInterface,
)
from botkit.records import map_values
from botkit.schema import dereference

T = TypeVar("T")


def _renamed(renames: dict[str, NameRef], name: str) -> str:
    ref = renames.get(name)
    return ref.name if ref is not None else name


def _place(target: dict[str, T], name: str, item: T, kind: str) -> None:
    """Add an item under its final name; two items landing on one name raise DefinitionError."""
    if name in target:
        raise DefinitionError(f"interface {kind} name '{name}' is used twice")
    target[name] = item


def resolve_interface(intrface: InterfaceExtensionInput) -> InterfaceExtensionOutput:
    """Dereference every schema of the interface and apply the consumer's renames.

    `resolved` holds concrete definitions keyed by their final names. `statement`
    maps each of the interface's own names to `{name: final_name}` and each entity
    key to the bound entity name, so the binding can be replayed later.
    """
    definition = intrface.package.definition
    entity_schemas = map_values(intrface.entities, lambda entity: entity.schema)

    resolved = ResolvedInterface()
    statement = InterfaceStatement(
        name=intrface.name,
        version=intrface.version,
        entities=map_values(intrface.entities, lambda entity: NameRef(entity.name)),
    )

    for action_name, action in definition.actions.items():
        new_name = _renamed(intrface.actions, action_name)
        resolved_action = replace(
            action,
            input=replace(action.input, schema=dereference(action.input.schema, entity_schemas)),
            output=replace(action.output, schema=dereference(action.output.schema, entity_schemas)),
        )
        _place(resolved.actions, new_name, resolved_action, "action")
        statement.actions[action_name] = NameRef(new_name)

    for event_name, event in definition.events.items():
        new_name = _renamed(intrface.events, event_name)
        resolved_event = replace(event, schema=dereference(event.schema, entity_schemas))
        _place(resolved.events, new_name, resolved_event, "event")
        statement.events[event_name] = NameRef(new_name)

    for channel_name, channel in definition.channels.items():
        # Messages keep their names; the channel already namespaces them.
        messages = {
            message_name: replace(message, schema=dereference(message.schema, entity_schemas))
            for message_name, message in channel.messages.items()
        }
        new_name = _renamed(intrface.channels, channel_name)
        _place(resolved.channels, new_name, replace(channel, messages=messages), "channel")
        statement.channels[channel_name] = NameRef(new_name)

    return InterfaceExtensionOutput(resolved=resolved, statement=statement)
