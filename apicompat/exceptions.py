"""Custom exceptions for the apicompat rule engine."""


class ApiCompatError(Exception):
    """Base exception for apicompat errors."""
    pass


class RuleError(ApiCompatError):
    """
    Raised by an assertion body when a fact does not comply with a rule.

    The runner catches it and records a failing result; it never escapes a run.
    """
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ApiCompatError):
    """Raised when input facts or context are malformed."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigError(ApiCompatError):
    """Raised when the engine configuration is invalid."""
    def __init__(self, key: str, message: str):
        super().__init__(f"Invalid configuration '{key}': {message}")
        self.key = key
        self.message = message


class UnexpectedStabilityError(ApiCompatError):
    """Raised when a stability has no entry in the sunset schedule."""
    def __init__(self, stability: str):
        super().__init__(f"unexpected stability {stability}")
        self.stability = stability
