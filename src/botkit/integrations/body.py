"""Request bodies for creating and updating an integration on the platform API.

Update bodies use delete-by-null semantics: a key present remotely but absent
locally is sent as null so the platform removes it.
"""

from __future__ import annotations

import copy
from typing import Any

from botkit.definitions import (
    ActionDefinition,
    ChannelDefinition,
    EntityDefinition,
    EventDefinition,
    StateDefinition,
)
from botkit.integrations.definition import ConfigurationDefinition, IntegrationDefinition
from botkit.records import map_values, set_null_on_missing_values, zip_records
from botkit.schema import to_json_schema

Body = dict[str, Any]


def _compact(item: Body) -> Body:
    return {key: value for key, value in item.items() if value is not None}


def _event_body(event: EventDefinition) -> Body:
    return _compact(
        {
            "title": event.title,
            "description": event.description,
            "attributes": dict(event.attributes),
            "schema": to_json_schema(event.schema),
        }
    )


def _action_body(action: ActionDefinition) -> Body:
    return _compact(
        {
            "title": action.title,
            "description": action.description,
            "billable": action.billable,
            "cacheable": action.cacheable,
            "attributes": dict(action.attributes),
            "input": {"schema": to_json_schema(action.input.schema)},
            "output": {"schema": to_json_schema(action.output.schema)},
        }
    )


def _channel_body(channel: ChannelDefinition) -> Body:
    return _compact(
        {
            "title": channel.title,
            "description": channel.description,
            "messages": map_values(
                channel.messages, lambda message: {"schema": to_json_schema(message.schema)}
            ),
            "message": {"tags": copy.deepcopy(channel.message_tags)},
            "conversation": {"tags": copy.deepcopy(channel.conversation_tags)},
        }
    )


def _state_body(state: StateDefinition) -> Body:
    return {"type": state.type, "schema": to_json_schema(state.schema)}


def _entity_body(entity: EntityDefinition) -> Body:
    return _compact(
        {
            "title": entity.title,
            "description": entity.description,
            "schema": to_json_schema(entity.schema),
        }
    )


def _configuration_body(configuration: ConfigurationDefinition) -> Body:
    return _compact(
        {
            "title": configuration.title,
            "description": configuration.description,
            "schema": to_json_schema(configuration.schema),
            "identifier": copy.deepcopy(configuration.identifier),
        }
    )


def prepare_create_integration_body(integration: IntegrationDefinition) -> Body:
    """Wire body for a new integration, with every schema converted to JSON schema."""
    return {
        "name": integration.name,
        "version": integration.version,
        "title": integration.title,
        "description": integration.description,
        "icon": integration.icon,
        "readme": integration.readme,
        "user": copy.deepcopy(integration.user),
        "identifier": copy.deepcopy(integration.identifier),
        "configuration": (
            _configuration_body(integration.configuration) if integration.configuration else None
        ),
        "configurations": map_values(integration.configurations, _configuration_body),
        "events": map_values(integration.events, _event_body),
        "actions": map_values(integration.actions, _action_body),
        "channels": map_values(integration.channels, _channel_body),
        "states": map_values(integration.states, _state_body),
        "entities": map_values(integration.entities, _entity_body),
        "attributes": dict(integration.attributes),
        "interfaces": map_values(integration.interfaces, lambda statement: statement.to_dict()),
        "extraOperations": copy.deepcopy(integration.extra_operations),
    }


def prepare_update_integration_body(local: Body, remote: Body) -> Body:
    """Diff a local create-style body against the integration currently on the platform.

    Neither argument is mutated.
    """
    body = _maybe_remove_scripts(local, remote)
    local_user = local.get("user") or {}
    remote_user = remote.get("user") or {}

    body.update(
        {
            "actions": _prepare_attribute_update_body(
                set_null_on_missing_values(local.get("actions"), remote.get("actions")),
                remote.get("actions") or {},
            ),
            "events": _prepare_attribute_update_body(
                set_null_on_missing_values(local.get("events"), remote.get("events")),
                remote.get("events") or {},
            ),
            "states": set_null_on_missing_values(local.get("states"), remote.get("states")),
            "entities": set_null_on_missing_values(local.get("entities"), remote.get("entities")),
            "user": {
                **copy.deepcopy(local_user),
                "tags": set_null_on_missing_values(local_user.get("tags"), remote_user.get("tags")),
            },
            "channels": _prepare_channels_body(local.get("channels") or {}, remote.get("channels") or {}),
            "interfaces": set_null_on_missing_values(
                local.get("interfaces"), remote.get("interfaces")
            ),
            # Built from the script-cleared copy so cleared per-configuration scripts survive.
            "configurations": set_null_on_missing_values(
                body.get("configurations"), remote.get("configurations")
            ),
            "readme": local.get("readme"),
            "icon": local.get("icon"),
            "attributes": set_null_on_missing_values(
                local.get("attributes"), remote.get("attributes")
            ),
            "extraOperations": local.get("extraOperations"),
        }
    )
    return body


def _prepare_attribute_update_body(local_items: Body, remote_items: Body) -> Body:
    items: Body = {}
    for name, item in local_items.items():
        remote_item = remote_items.get(name)
        if item is None or remote_item is None:
            items[name] = item
            continue
        items[name] = {
            **item,
            "attributes": set_null_on_missing_values(
                item.get("attributes"), remote_item.get("attributes")
            ),
        }
    return items


def _ensure(container: Body, key: str, fallback: Any) -> Any:
    if container.get(key) is None:
        container[key] = copy.deepcopy(fallback)
    return container[key]


def _maybe_remove_scripts(local: Body, remote: Body) -> Body:
    """Null out generated scripts the remote still has but the local definition dropped."""
    body = copy.deepcopy(local)

    remote_configuration = remote.get("configuration") or {}
    remote_identifier = remote_configuration.get("identifier") or {}
    local_identifier = (local.get("configuration") or {}).get("identifier") or {}
    if remote_identifier.get("linkTemplateScript") and not local_identifier.get(
        "linkTemplateScript"
    ):
        configuration = _ensure(body, "configuration", remote_configuration)
        identifier = _ensure(configuration, "identifier", remote_identifier)
        identifier["linkTemplateScript"] = None
        identifier["required"] = False

    remote_top_identifier = remote.get("identifier") or {}
    local_top_identifier = local.get("identifier") or {}
    for script in ("extractScript", "fallbackHandlerScript"):
        if remote_top_identifier.get(script) and not local_top_identifier.get(script):
            identifier = _ensure(body, "identifier", remote_top_identifier)
            identifier[script] = None

    remote_configurations = remote.get("configurations") or {}
    local_configurations = local.get("configurations") or {}
    for config_name in local_configurations:
        remote_config = remote_configurations.get(config_name) or {}
        remote_config_identifier = remote_config.get("identifier") or {}
        local_config_identifier = (local_configurations.get(config_name) or {}).get(
            "identifier"
        ) or {}
        if remote_config_identifier.get("linkTemplateScript") and not local_config_identifier.get(
            "linkTemplateScript"
        ):
            configurations = _ensure(body, "configurations", remote_configurations)
            config = _ensure(configurations, config_name, remote_config)
            identifier = _ensure(config, "identifier", remote_config_identifier)
            identifier["linkTemplateScript"] = None
            identifier["required"] = False

    return body


def _prepare_channels_body(local_channels: Body, remote_channels: Body) -> Body:
    channels: Body = {}
    for name, (local_channel, remote_channel) in zip_records(local_channels, remote_channels).items():
        if local_channel is not None and remote_channel is not None:
            channels[name] = _prepare_channel_body(local_channel, remote_channel)
        elif local_channel is not None:
            channels[name] = copy.deepcopy(local_channel)
        elif remote_channel is not None:
            channels[name] = None
    return channels


def _prepare_channel_body(local_channel: Body, remote_channel: Body) -> Body:
    local_message = local_channel.get("message") or {}
    local_conversation = local_channel.get("conversation") or {}
    remote_message = remote_channel.get("message") or {}
    remote_conversation = remote_channel.get("conversation") or {}
    return {
        **copy.deepcopy(local_channel),
        "messages": set_null_on_missing_values(
            local_channel.get("messages"), remote_channel.get("messages")
        ),
        "message": {
            **copy.deepcopy(local_message),
            "tags": set_null_on_missing_values(
                local_message.get("tags"), remote_message.get("tags")
            ),
        },
        "conversation": {
            **copy.deepcopy(local_conversation),
            "tags": set_null_on_missing_values(
                local_conversation.get("tags"), remote_conversation.get("tags")
            ),
        },
    }
