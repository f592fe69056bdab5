"""Integration definition and platform request bodies."""

from botkit.integrations.body import prepare_create_integration_body, prepare_update_integration_body
from botkit.integrations.definition import IntegrationDefinition

__all__ = ["IntegrationDefinition", "prepare_create_integration_body", "prepare_update_integration_body"]
