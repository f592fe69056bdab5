"""Botkit exception hierarchy.

All botkit-specific exceptions inherit from BotkitError,
enabling structured error handling and cleaner catch clauses.
"""


class BotkitError(Exception):
    """Base exception for all botkit errors."""

    def __init__(self, message: str = "", *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


class NotFoundError(BotkitError):
    """A model reference resolved to nothing installed."""


class NoModelAvailableError(NotFoundError):
    """Every candidate model is missing or currently in downtime."""


class AbortError(BotkitError):
    """The cancellation signal fired before the call could complete."""

    def __init__(self, message: str = "operation aborted", *, reason: object = None) -> None:
        super().__init__(message)
        self.reason = reason


class UpstreamError(BotkitError):
    """Error raised by the action invoker, optionally pre-classified.

    `action` is one of "abort", "fallback" or "retry" when the transport
    already knows how the failure should be handled.
    """

    def __init__(
        self,
        message: str = "",
        *,
        status_code: int | None = None,
        action: str | None = None,
        retryable: bool = True,
    ) -> None:
        super().__init__(message, retryable=retryable)
        self.status_code = status_code
        self.action = action


class UnresolvedEntityError(BotkitError):
    """A schema references an entity with no concrete binding."""

    def __init__(self, entity: str) -> None:
        super().__init__(f"entity '{entity}' is not bound to a schema")
        self.entity = entity


class DefinitionError(BotkitError):
    """Invalid integration or interface definition."""


class ConfigError(BotkitError):
    """Invalid or missing configuration."""
