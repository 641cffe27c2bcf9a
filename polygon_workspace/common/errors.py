"""Domain errors and failure typing."""


class WorkspaceError(Exception):
    """Base class for polygon workspace failures."""

    error_code = "WORKSPACE_ERROR"


class ConfigError(WorkspaceError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class GenerationError(WorkspaceError):
    """Raised when codes are generated from an incomplete workspace."""

    error_code = "GENERATION_ERROR"


class StorageError(WorkspaceError):
    """Base class for generation store failures."""

    error_code = "STORAGE_ERROR"


class StorageWriteError(StorageError):
    """Raised when the storage medium rejects a save, delete or clear."""

    error_code = "STORAGE_WRITE_ERROR"


class StorageReadError(StorageError):
    """Raised when the storage medium cannot be read."""

    error_code = "STORAGE_READ_ERROR"
