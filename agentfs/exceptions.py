"""
Custom exceptions for the application.
"""


class BaseAppError(Exception):
    """Base exception class for application errors."""

    pass


class LLMError(BaseAppError):
    """Exception raised for LLM-related errors."""

    pass


class FileRepositoryError(BaseAppError):
    """Exception raised for file repository errors."""

    pass


class ConfigurationError(BaseAppError):
    """Exception raised for configuration errors."""

    pass


class OutOfWorkspaceError(BaseAppError):
    """Exception raised when a path resolves outside the workspace root."""

    def __init__(self, path: str, root: str):
        super().__init__(f"Path is outside of workspace root {root}: {path}")
        self.path = path
        self.root = root


class InterpreterError(BaseAppError):
    """Exception raised when a plan step cannot be translated into mutations."""

    pass


class PlanNotFoundError(BaseAppError):
    """Exception raised when a plan id is not registered."""

    pass
