"""Custom exceptions for Promptbook."""

from typing import Any, Dict, List, Optional


class PromptbookException(Exception):
    """Base exception for all Promptbook errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or []
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API response."""
        result = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class ValidationError(PromptbookException):
    """Raised when input validation fails.

    ``details`` holds one ``{"field": ..., "message": ...}`` entry per problem.
    """

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message, code="VALIDATION_ERROR", details=details)

    @property
    def fields(self) -> List[str]:
        """Names of the fields that failed validation."""
        return [d["field"] for d in self.details if "field" in d]


class AuthenticationError(PromptbookException):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="UNAUTHORIZED")


class AuthorizationError(PromptbookException):
    """Raised when user lacks permission."""

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message, code="FORBIDDEN")


class NotFoundError(PromptbookException):
    """Raised when a resource is not found.

    The message never says whether the resource exists under another owner.
    """

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            message=f"{resource} not found: {identifier}",
            code="NOT_FOUND",
        )
