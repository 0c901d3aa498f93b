from typing import List, Optional


class InvariantViolation(Exception):
    """Raised when a document breaks a domain rule."""


class ContentValidationError(InvariantViolation):
    def __init__(self, errors: List[str], message: Optional[str] = None):
        self.errors = list(errors)
        super().__init__(message or "Validation failed")
