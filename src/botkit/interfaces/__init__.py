"""Interface resolution package."""

from botkit.interfaces.resolve import resolve_interface

__all__ = ["resolve_interface"]
