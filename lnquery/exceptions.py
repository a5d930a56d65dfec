"""Exception hierarchy for lnquery.

Every exception carries a human-readable message plus optional structured
context, so it can be logged with structlog without string munging.

Usage:
    from lnquery.exceptions import GatewayError, InvalidCapacityError

    try:
        channels = await gateway.get_channels()
    except GatewayError as e:
        logger.error("channel_fetch_failed", error=str(e), context=e.context)
"""

from __future__ import annotations

from typing import Any


class LNQueryError(Exception):
    """Base exception for all lnquery errors.

    Attributes:
        message: Human-readable error message
        context: Additional context for debugging (dict)
        original_error: Original exception if wrapped
    """

    def __init__(
        self,
        message: str,
        *,
        context: dict[str, Any] | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize exception with rich context.

        Args:
            message: Human-readable error description
            context: Additional structured data for debugging
            original_error: Original exception if this wraps another error
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.original_error = original_error

    def __str__(self) -> str:
        """Format exception with context for logging."""
        base = self.message
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base = f"{base} ({ctx_str})"
        if self.original_error:
            base = f"{base} [caused by: {type(self.original_error).__name__}]"
        return base

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return f"{self.__class__.__name__}(message={self.message!r}, context={self.context!r})"


# =============================================================================
# Validation & Input Errors
# =============================================================================


class ValidationError(LNQueryError):
    """Raised when a value object or record fails validation."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        constraint: str | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize validation error.

        Args:
            message: Error description
            field: Name of the invalid field
            value: The invalid value (truncated in context)
            constraint: Validation constraint that was violated
            **kwargs: Additional context
        """
        context = kwargs.get("context", {})
        if field:
            context["field"] = field
        if value is not None:
            context["value"] = str(value)[:100]
        if constraint:
            context["constraint"] = constraint
        kwargs["context"] = context
        super().__init__(message, **kwargs)


class InvalidCapacityError(ValidationError):
    """Raised when a channel capacity is not a positive amount."""


class InvalidBalanceError(ValidationError):
    """Raised when a channel balance is negative."""


class InvalidHealthCriteriaError(ValidationError):
    """Raised when health criteria bounds are out of range or inverted."""


class ConfigurationError(LNQueryError):
    """Raised when application configuration is invalid or missing."""

    def __init__(
        self,
        message: str,
        *,
        setting: str | None = None,
        expected: str | None = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        if setting:
            context["setting"] = setting
        if expected:
            context["expected"] = expected
        kwargs["context"] = context
        super().__init__(message, **kwargs)


# =============================================================================
# Query Routing Errors
# =============================================================================


class IntentClassificationError(LNQueryError):
    """Raised inside the classifier; never escapes it (downgraded to an unknown intent)."""


class NoHandlerFoundError(LNQueryError):
    """Raised when no domain handler accepts an intent."""

    def __init__(
        self,
        message: str,
        *,
        domain: str | None = None,
        operation: str | None = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        if domain:
            context["domain"] = domain
        if operation:
            context["operation"] = operation
        kwargs["context"] = context
        super().__init__(message, **kwargs)


# =============================================================================
# External Integration Errors
# =============================================================================


class IntegrationError(LNQueryError):
    """Base class for errors raised by external collaborators."""


class GatewayError(IntegrationError):
    """Raised when the Lightning node gateway fails."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        if operation:
            context["operation"] = operation
        kwargs["context"] = context
        super().__init__(message, **kwargs)


class AliasLookupError(GatewayError):
    """Raised when a node alias cannot be resolved."""

    def __init__(self, message: str, *, pubkey: str | None = None, **kwargs: Any) -> None:
        context = kwargs.get("context", {})
        if pubkey:
            context["pubkey"] = f"{pubkey[:8]}..."
        kwargs["context"] = context
        kwargs.setdefault("operation", "get_node_alias")
        super().__init__(message, **kwargs)


# =============================================================================
# Utility Functions
# =============================================================================


def wrap_exception(
    error: Exception,
    message: str,
    *,
    exception_class: type[LNQueryError] = LNQueryError,
    **context: Any,
) -> LNQueryError:
    """Wrap an external exception in the lnquery hierarchy.

    Args:
        error: Original exception to wrap
        message: Human-readable description
        exception_class: Which lnquery exception to use
        **context: Additional context to attach

    Returns:
        Wrapped exception with original error preserved

    Example:
        try:
            records = await gateway.get_channels()
        except OSError as e:
            raise wrap_exception(e, "Node unreachable", exception_class=GatewayError)
    """
    return exception_class(
        message,
        context=context,
        original_error=error,
    )


__all__ = [
    "LNQueryError",
    "ValidationError",
    "InvalidCapacityError",
    "InvalidBalanceError",
    "InvalidHealthCriteriaError",
    "ConfigurationError",
    "IntentClassificationError",
    "NoHandlerFoundError",
    "IntegrationError",
    "GatewayError",
    "AliasLookupError",
    "wrap_exception",
]
