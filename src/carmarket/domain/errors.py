"""Domain error classes.

Protocol-agnostic errors that represent business failures.
These errors are translated to HTTP responses by the entrypoint layer.

Search input is never rejected by these errors: malformed facets are dropped
at the parse boundary (see ``carmarket.domain.filters``). They cover lookups,
programmer guardrails and collaborator failures.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain errors.

    Contains business error information that can be translated
    to any transport format.
    """

    # Default error code (can be used as i18n key)
    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, **context: Any) -> None:
        """Create a domain error.

        Args:
            message: Human-readable error message (default locale)
            **context: Additional context for error (e.g., field names, values)
        """
        self.message = message
        self.context = context
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured format for protocol translation."""
        return {
            "message": self.message,
            "code": self.error_code,
            **self.context,
        }


class ValidationError(DomainError):
    """Business rule validation error.

    Examples:
        - listing_id is not a valid UUID
        - price bound built as float instead of Decimal

    Protocol mappings:
        - REST: 422 Unprocessable Entity
    """

    error_code: str = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, str]] | None = None,
        **context: Any,
    ) -> None:
        """Create a validation error.

        Args:
            message: Overall validation error message (optional if errors provided)
            errors: List of field-specific errors, each with 'field' and 'message'
                   Example: [{"field": "listing_id", "message": "Must be a valid UUID"}]
            **context: Additional context
        """
        self.errors: list[dict[str, str]] | None
        if errors:
            self.errors = errors
            msg = message or "Validation failed"
        else:
            self.errors = None
            msg = message or "Validation error"

        super().__init__(msg, **context)

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured format."""
        if self.errors:
            return {
                "message": self.message,
                "code": self.error_code,
                "errors": self.errors,
                **self.context,
            }
        return super().to_dict()


class NotFoundError(DomainError):
    """Resource not found.

    Examples:
        - Listing with ID not found (or not publicly visible)
        - Car make referenced by id does not exist

    Protocol mappings:
        - REST: 404 Not Found
    """

    error_code: str = "NOT_FOUND"

    def __init__(self, resource: str, identifier: str | None = None, **context: Any) -> None:
        """Create a not found error.

        Args:
            resource: Type of resource (e.g., "Listing", "Make")
            identifier: Resource identifier (e.g., UUID, ID)
            **context: Additional context
        """
        if identifier:
            message = f"{resource} with identifier '{identifier}' not found"
        else:
            message = f"{resource} not found"

        super().__init__(message, resource=resource, identifier=identifier, **context)


class ExternalServiceError(DomainError):
    """A collaborator outside the process failed or timed out.

    Raised by the text-completion adapter. Assistant use cases catch it and
    answer with their fixed fallback templates, so it only reaches a client
    when a caller forgets to.

    Protocol mappings:
        - REST: 502 Bad Gateway
    """

    error_code: str = "EXTERNAL_SERVICE_ERROR"

    def __init__(self, service: str, message: str, **context: Any) -> None:
        super().__init__(message, service=service, **context)


class InternalError(DomainError):
    """Internal domain error (unexpected conditions).

    Should be logged for investigation.

    Protocol mappings:
        - REST: 500 Internal Server Error
    """

    error_code: str = "INTERNAL_ERROR"
