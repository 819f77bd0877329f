"""Custom exceptions for datatreediff."""


class DataTreeDiffError(Exception):
    """Base exception for datatreediff errors."""
    pass


class InputError(DataTreeDiffError):
    """Raised when a source document or saved session cannot be read."""
    def __init__(self, message: str, path: str = None):
        super().__init__(message)
        self.message = message
        self.path = path


class MalformedDocumentError(InputError):
    """Raised when a source was read but its content cannot be parsed."""
    def __init__(self, message: str, path: str = None, reason: str = None):
        super().__init__(message, path)
        self.reason = reason

    def __str__(self):
        if self.reason:
            return f"{self.message}: {self.reason}"
        return self.message


class OutputError(DataTreeDiffError):
    """Raised when a result cannot be written."""
    def __init__(self, message: str, path: str = None):
        super().__init__(message)
        self.message = message
        self.path = path


class ConfigError(DataTreeDiffError):
    """Raised when the run configuration is invalid."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MaxDepthExceededError(DataTreeDiffError):
    """Raised when document nesting exceeds the configured depth."""
    def __init__(self, depth: int, path: str):
        super().__init__(f"Maximum depth ({depth}) exceeded at path: {path or '<root>'}")
        self.depth = depth
        self.path = path
