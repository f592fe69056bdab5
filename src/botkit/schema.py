"""Schema conversion and entity placeholder substitution.

A schema is either a pydantic model class or a JSON schema dict. Interface
definitions mark the places where a consumer-supplied entity goes with
`entity_ref("item")`, a JSON schema node carrying the `x-entity-ref` key.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any, Union

from pydantic import BaseModel

from botkit.errors import DefinitionError, UnresolvedEntityError

ENTITY_REF_KEY = "x-entity-ref"
DEFS_KEY = "$defs"

Schema = Union[type[BaseModel], Mapping[str, Any]]


def entity_ref(name: str, **extra: Any) -> dict[str, Any]:
    return {ENTITY_REF_KEY: name, **extra}


def to_json_schema(schema: Schema) -> dict[str, Any]:
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        return schema.model_json_schema()
    if isinstance(schema, Mapping):
        return copy.deepcopy(dict(schema))
    raise DefinitionError(f"unsupported schema type: {type(schema).__name__}")


def dereference(schema: Schema, entities: Mapping[str, Schema]) -> dict[str, Any]:
    """Return a JSON schema with every entity placeholder replaced by its bound schema.

    Definitions a bound schema carries under `$defs` (pydantic emits them for
    nested models) are lifted to the root `$defs` so their `#/$defs/...` refs
    still resolve. Two different definitions under one name raise
    DefinitionError.

    Raises UnresolvedEntityError when a placeholder names an entity missing from
    `entities`. The input schema is left untouched.
    """
    root = to_json_schema(schema)
    root_defs = root.pop(DEFS_KEY, None) or {}
    defs: dict[str, Any] = {}
    resolved = _substitute(root, entities, defs)
    _merge_defs(defs, _substitute(root_defs, entities, defs))
    if defs:
        resolved[DEFS_KEY] = defs
    return resolved


def _merge_defs(target: dict[str, Any], incoming: Mapping[str, Any]) -> None:
    for name, definition in incoming.items():
        if name in target and target[name] != definition:
            raise DefinitionError(f"schema definition '{name}' is bound to two different schemas")
        target[name] = definition


def _substitute(node: Any, entities: Mapping[str, Schema], defs: dict[str, Any]) -> Any:
    if isinstance(node, dict):
        name = node.get(ENTITY_REF_KEY)
        if isinstance(name, str):
            if name not in entities:
                raise UnresolvedEntityError(name)
            entity_schema = to_json_schema(entities[name])
            _merge_defs(defs, entity_schema.pop(DEFS_KEY, None) or {})
            # Keys set next to the placeholder (description, title) win over the entity's own.
            overrides = {key: value for key, value in node.items() if key != ENTITY_REF_KEY}
            return {**entity_schema, **overrides}
        return {key: _substitute(value, entities, defs) for key, value in node.items()}
    if isinstance(node, list):
        return [_substitute(item, entities, defs) for item in node]
    return node
