"""Custom exceptions for notegit.

Provides a structured exception hierarchy with error codes and
machine-readable error information, so the orchestrator can decide
which failures abort a run and which only degrade it.
"""
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCode(Enum):
    """Error codes for machine-readable error identification."""

    # Configuration errors (1xxx)
    CONFIG_INVALID = 1001
    CONFIG_MISSING = 1002

    # Filesystem errors (2xxx)
    DIRECTORY_CLEAN_FAILED = 2001
    EXPORT_WRITE_FAILED = 2002

    # Host store errors (3xxx)
    HOST_REQUEST_FAILED = 3001
    HOST_RESPONSE_INVALID = 3002

    # Git errors (4xxx)
    GIT_NOT_FOUND = 4001
    GIT_COMMAND_FAILED = 4002
    GIT_TIMEOUT = 4003
    GIT_BOOTSTRAP_FAILED = 4004
    GIT_COMMIT_FAILED = 4005
    GIT_PUSH_FAILED = 4006


class NoteGitError(Exception):
    """Base exception for all notegit errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Additional context about the error
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_INVALID,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for serialization."""
        return {
            "error": self.__class__.__name__,
            "code": self.code.value,
            "code_name": self.code.name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"[{self.code.name}] {self.message} ({detail_str})"
        return f"[{self.code.name}] {self.message}"


class ConfigurationError(NoteGitError):
    """Raised for missing or invalid settings."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        code: ErrorCode = ErrorCode.CONFIG_INVALID,
    ):
        details = {}
        if config_key:
            details["config_key"] = config_key

        super().__init__(message, code=code, details=details)
        self.config_key = config_key


class StorageError(NoteGitError):
    """Raised when the export directory cannot be read or written."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        path: Optional[str] = None,
        code: ErrorCode = ErrorCode.DIRECTORY_CLEAN_FAILED,
        original_error: Optional[Exception] = None,
    ):
        details = {}
        if operation:
            details["operation"] = operation
        if path:
            details["path"] = path
        if original_error:
            details["original_error"] = str(original_error)[:200]

        super().__init__(message, code=code, details=details)
        self.operation = operation
        self.path = path
        self.original_error = original_error


class ExportError(StorageError):
    """Raised when the export walk aborts part way through the tree.

    Attributes:
        written_notes: Number of note files written before the failure
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        written_notes: int = 0,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message,
            operation="export",
            path=path,
            code=ErrorCode.EXPORT_WRITE_FAILED,
            original_error=original_error,
        )
        self.written_notes = written_notes
        self.details["written_notes"] = written_notes


class HostStoreError(NoteGitError):
    """Raised when the host note store fails or answers with an unexpected shape."""

    def __init__(
        self,
        message: str,
        resource: Optional[str] = None,
        status_code: Optional[int] = None,
        code: ErrorCode = ErrorCode.HOST_REQUEST_FAILED,
        original_error: Optional[Exception] = None,
    ):
        details: Dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if status_code is not None:
            details["status_code"] = status_code
        if original_error:
            details["original_error"] = str(original_error)[:200]

        super().__init__(message, code=code, details=details)
        self.resource = resource
        self.status_code = status_code
        self.original_error = original_error


class GitError(NoteGitError):
    """Raised when a git invocation fails.

    Attributes:
        command: The argument vector that failed (if applicable)
        returncode: Exit code from git (if applicable)
        stderr: Error output from git (if applicable)
    """

    def __init__(
        self,
        message: str,
        command: Optional[List[str]] = None,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
        code: ErrorCode = ErrorCode.GIT_COMMAND_FAILED,
    ):
        details: Dict[str, Any] = {}
        if command:
            details["command"] = " ".join(command)
        if returncode is not None:
            details["returncode"] = returncode
        if stderr:
            details["stderr"] = stderr[:200]

        super().__init__(message, code=code, details=details)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
