"""Completion client package."""

from botkit.cognitive.base import ActionResult, Request, Response
from botkit.cognitive.client import Cognitive
from botkit.cognitive.http import HttpActionClient
from botkit.cognitive.models import Downtime, Model, ModelPreferences
from botkit.cognitive.providers import RemoteModelProvider, StaticModelProvider
from botkit.cognitive.signal import AbortSignal

__all__ = [
    "AbortSignal",
    "ActionResult",
    "Cognitive",
    "Downtime",
    "HttpActionClient",
    "Model",
    "ModelPreferences",
    "RemoteModelProvider",
    "Request",
    "Response",
    "StaticModelProvider",
]
