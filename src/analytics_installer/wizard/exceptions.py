"""
Analytics Installer Exceptions

Custom exception types for better error handling and remediation suggestions.
"""

from typing import Optional, List


class InstallerError(Exception):
    """Base exception for all installer errors."""

    def __init__(
        self,
        message: str,
        remediation: Optional[str] = None,
        details: Optional[str] = None
    ):
        """Initialize the error.

        Args:
            message: Human-readable error message
            remediation: Suggested fix for the user
            details: Technical details for debugging
        """
        super().__init__(message)
        self.message = message
        self.remediation = remediation
        self.details = details

    def __str__(self) -> str:
        parts = [self.message]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.remediation:
            parts.append(f"To fix: {self.remediation}")
        return "\n".join(parts)


class ValidationError(InstallerError):
    """Form input validation errors."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        expected_format: Optional[str] = None,
        remediation: Optional[str] = None,
        details: Optional[str] = None
    ):
        self.field = field
        self.expected_format = expected_format
        if not remediation and field and expected_format:
            remediation = f"The {field} should be in format: {expected_format}"
        super().__init__(message, remediation, details)


class ConfigError(InstallerError):
    """Errors writing the environment or service configuration files."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        remediation: Optional[str] = None,
        details: Optional[str] = None
    ):
        self.path = path
        if not remediation and path:
            remediation = f"Check that {path} is writable and try again"
        super().__init__(message, remediation, details)


class ProcessSpawnError(InstallerError):
    """The external command could not be launched."""

    def __init__(
        self,
        message: str,
        command: Optional[List[str]] = None,
        remediation: Optional[str] = None,
        details: Optional[str] = None
    ):
        self.command = command or []
        if not remediation and self.command:
            remediation = f"Make sure '{self.command[0]}' is installed and on your PATH"
        super().__init__(message, remediation, details)


class ProcessExitError(InstallerError):
    """The external command ran but exited with a non-zero status."""

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        remediation: Optional[str] = None,
        details: Optional[str] = None
    ):
        self.returncode = returncode
        if not details and returncode is not None:
            details = f"exit status {returncode}"
        if not remediation:
            remediation = "Review the installation logs above, fix the cause and run the installer again"
        super().__init__(message, remediation, details)


class StreamReadError(InstallerError):
    """Reading the command output failed."""

    def __init__(
        self,
        message: str,
        stream: Optional[str] = None,
        remediation: Optional[str] = None,
        details: Optional[str] = None
    ):
        self.stream = stream
        super().__init__(message, remediation, details)


# Error code mapping for CLI exit codes
ERROR_CODES = {
    ValidationError: 14,
    ConfigError: 10,
    ProcessSpawnError: 20,
    ProcessExitError: 21,
    StreamReadError: 22,
    InstallerError: 1,
}


def get_error_code(error: Exception) -> int:
    """Get the exit code for an error type."""
    for error_type, code in ERROR_CODES.items():
        if isinstance(error, error_type):
            return code
    return 1
