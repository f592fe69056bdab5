import copy

from pydantic import BaseModel

from botkit.definitions import (
    ActionDefinition,
    ChannelDefinition,
    EntityDefinition,
    EventDefinition,
    MessageDefinition,
    SchemaDefinition,
    StateDefinition,
)
from botkit.integrations import (
    IntegrationDefinition,
    prepare_create_integration_body,
    prepare_update_integration_body,
)
from botkit.integrations.definition import ConfigurationDefinition
from botkit.interfaces.types import InterfaceStatement, NameRef


class SendInput(BaseModel):
    channel: str
    text: str


def _integration() -> IntegrationDefinition:
    return IntegrationDefinition(
        name="slack",
        version="1.2.0",
        title="Slack",
        readme="# Slack",
        configuration=ConfigurationDefinition(schema={"type": "object"}),
        actions={
            "send": ActionDefinition(
                input=SchemaDefinition(SendInput),
                output=SchemaDefinition({"type": "object"}),
                billable=True,
                attributes={"category": "messaging"},
            )
        },
        events={"reaction": EventDefinition(schema={"type": "object"})},
        channels={
            "dm": ChannelDefinition(
                messages={"text": MessageDefinition({"type": "object"})},
                message_tags={"ts": {"title": "Timestamp"}},
            )
        },
        states={"sync": StateDefinition(type="integration", schema={"type": "object"})},
        entities={"user": EntityDefinition(schema={"type": "object"}, title="User")},
        interfaces={
            "typing": InterfaceStatement(
                name="typing",
                version="0.1.0",
                actions={"startTyping": NameRef("startTyping")},
            )
        },
    )


def test_create_body_converts_schemas() -> None:
    body = prepare_create_integration_body(_integration())

    assert body["name"] == "slack"
    assert body["configuration"] == {"schema": {"type": "object"}, "identifier": {}}
    send = body["actions"]["send"]
    assert send["input"]["schema"] == SendInput.model_json_schema()
    assert send["billable"] is True
    assert "title" not in send
    assert body["channels"]["dm"]["messages"]["text"] == {"schema": {"type": "object"}}
    assert body["channels"]["dm"]["message"] == {"tags": {"ts": {"title": "Timestamp"}}}
    assert body["states"]["sync"] == {"type": "integration", "schema": {"type": "object"}}
    assert body["entities"]["user"] == {"title": "User", "schema": {"type": "object"}}
    assert body["interfaces"]["typing"]["actions"] == {"startTyping": {"name": "startTyping"}}


def test_update_body_deletes_remote_only_keys() -> None:
    local = prepare_create_integration_body(_integration())
    remote = {
        "actions": {
            "send": {"attributes": {"category": "chat", "legacy": "yes"}},
            "oldAction": {"attributes": {}},
        },
        "events": {"reaction": {}, "oldEvent": {}},
        "states": {"oldState": {}},
        "entities": {"user": {}, "team": {}},
        "attributes": {"oldAttr": "1"},
        "interfaces": {"typing": {}, "oldInterface": {}},
        "user": {"tags": {"id": {}, "email": {}}},
    }
    local["user"] = {"tags": {"id": {}}}
    local_before = copy.deepcopy(local)
    remote_before = copy.deepcopy(remote)

    body = prepare_update_integration_body(local, remote)

    assert body["actions"]["oldAction"] is None
    assert body["actions"]["send"]["attributes"] == {"category": "messaging", "legacy": None}
    assert body["events"] == {"reaction": local["events"]["reaction"], "oldEvent": None}
    assert body["states"] == {"sync": local["states"]["sync"], "oldState": None}
    assert body["entities"]["team"] is None
    assert body["attributes"] == {"oldAttr": None}
    assert body["interfaces"]["oldInterface"] is None
    assert body["user"] == {"tags": {"id": {}, "email": None}}
    assert body["readme"] == "# Slack"
    assert local == local_before
    assert remote == remote_before


def test_update_body_channels() -> None:
    local = prepare_create_integration_body(_integration())
    local["channels"]["group"] = {"messages": {"text": {"schema": {}}}}
    remote = {
        "channels": {
            "dm": {
                "messages": {"text": {}, "image": {}},
                "message": {"tags": {"ts": {}, "thread": {}}},
                "conversation": {"tags": {"id": {}}},
            },
            "legacy": {"messages": {}},
        }
    }

    channels = prepare_update_integration_body(local, remote)["channels"]

    assert channels["dm"]["messages"] == {"text": {"schema": {"type": "object"}}, "image": None}
    assert channels["dm"]["message"]["tags"] == {"ts": {"title": "Timestamp"}, "thread": None}
    assert channels["dm"]["conversation"]["tags"] == {"id": None}
    assert channels["group"] == {"messages": {"text": {"schema": {}}}}
    assert channels["legacy"] is None


def test_update_body_clears_scripts_removed_locally() -> None:
    local = {
        "configuration": {"schema": {}, "identifier": {}},
        "identifier": {},
        "configurations": {"oauth": {"schema": {}}, "manual": {"schema": {}}},
    }
    remote = {
        "configuration": {"identifier": {"linkTemplateScript": "link()", "required": True}},
        "identifier": {"extractScript": "extract()", "fallbackHandlerScript": "fallback()"},
        "configurations": {
            "oauth": {"identifier": {"linkTemplateScript": "oauth()", "required": True}},
            "manual": {"identifier": {}},
            "removed": {"identifier": {}},
        },
    }

    body = prepare_update_integration_body(local, remote)

    assert body["configuration"]["identifier"] == {"linkTemplateScript": None, "required": False}
    assert body["identifier"] == {"extractScript": None, "fallbackHandlerScript": None}
    assert body["configurations"]["oauth"]["identifier"] == {
        "linkTemplateScript": None,
        "required": False,
    }
    assert body["configurations"]["manual"] == {"schema": {}}
    assert body["configurations"]["removed"] is None
    assert local["configuration"]["identifier"] == {}


def test_update_body_keeps_scripts_still_defined_locally() -> None:
    local = {"identifier": {"extractScript": "new()"}}
    remote = {"identifier": {"extractScript": "old()"}}

    body = prepare_update_integration_body(local, remote)

    assert body["identifier"] == {"extractScript": "new()"}
