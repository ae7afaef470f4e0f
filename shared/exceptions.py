"""Custom exception types."""

from typing import Dict, Optional


class ValidationError(ValueError):
    """Raised when a submitted form is missing a required field or holds an invalid value."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {'error': str(self), 'field': self.field}


class InvalidCredentialsError(Exception):
    """Raised when the entered password does not match the selected profile."""


class AIUnavailableError(Exception):
    """Raised when the language-model API is not configured."""
