"""
Error handling for barnine.

Structured error codes shared by the engine, the producers and the control
socket. None of these ever reach the status line itself; they are logged.
"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(Enum):
    """
    Error codes for barnine.

    Ranges:
    - 1100-1199: Configuration errors
    - 1200-1299: Device / file system errors
    - 1300-1399: D-Bus errors
    - 1400-1499: Sway IPC errors
    - 1500-1599: Engine state errors
    """

    # Configuration errors (1100-1199)
    CONFIG_LOAD_FAILED = 1100
    CONFIG_SYNTAX_ERROR = 1101
    CONFIG_SCHEMA_ERROR = 1102

    # Device / file system errors (1200-1299)
    FILE_NOT_FOUND = 1200
    FILE_READ_ERROR = 1201
    DEVICE_VALUE_INVALID = 1202

    # D-Bus errors (1300-1399)
    DBUS_CALL_FAILED = 1300
    NO_AUDIO_SINK = 1301

    # Sway IPC errors (1400-1499)
    SWAY_IPC_FAILED = 1400

    # Engine state errors (1500-1599)
    INVALID_GRID_ID = 1500
    INVALID_GRID_COMMAND = 1501
    CHANNEL_CLOSED = 1502


class BarError(Exception):
    """Base exception for barnine errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize barnine error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            suggestion: Suggested recovery action
            context: Additional context for debugging
        """
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for structured logging.

        Returns:
            Error dictionary with code, message, suggestion, and context
        """
        result = {
            "code": self.code.value,
            "message": self.message
        }

        if self.suggestion:
            result["suggestion"] = self.suggestion

        if self.context:
            result["context"] = self.context

        return result


class ConfigLoadError(BarError):
    """Configuration loading error."""

    def __init__(self, file_path: str, reason: str, code: ErrorCode = ErrorCode.CONFIG_LOAD_FAILED):
        """
        Initialize configuration load error.

        Args:
            file_path: Path to configuration file
            reason: Reason for load failure
            code: More specific configuration error code
        """
        super().__init__(
            code=code,
            message=f"Failed to load configuration from {file_path}: {reason}",
            suggestion="Check file syntax; the previous configuration stays active",
            context={"file_path": file_path, "reason": reason}
        )


class InvalidGridIdError(BarError):
    """Workspace number outside the nine-grid numbering."""

    def __init__(self, workspace: int):
        super().__init__(
            code=ErrorCode.INVALID_GRID_ID,
            message=f"Workspace {workspace} is not part of the nine grid",
            context={"workspace": workspace}
        )


class InvalidGridCommandError(BarError):
    """Grid command of an unknown shape."""

    def __init__(self, command: Any):
        super().__init__(
            code=ErrorCode.INVALID_GRID_COMMAND,
            message=f"Unsupported grid command: {command!r}",
        )


class ChannelClosedError(BarError):
    """Update sent after the consumer went away."""

    def __init__(self):
        super().__init__(
            code=ErrorCode.CHANNEL_CLOSED,
            message="Update channel is closed",
            suggestion="The status line engine has stopped; restart barnine"
        )


class DeviceReadError(BarError):
    """Sysfs device value could not be read."""

    def __init__(self, path: str, reason: str, code: ErrorCode = ErrorCode.FILE_READ_ERROR):
        super().__init__(
            code=code,
            message=f"Failed to read {path}: {reason}",
            context={"path": path, "reason": reason}
        )


class DbusError(BarError):
    """D-Bus communication error."""

    def __init__(self, operation: str, reason: str, code: ErrorCode = ErrorCode.DBUS_CALL_FAILED):
        """
        Initialize D-Bus error.

        Args:
            operation: D-Bus operation that failed
            reason: Reason for failure
            code: More specific D-Bus error code
        """
        super().__init__(
            code=code,
            message=f"D-Bus {operation} failed: {reason}",
            suggestion="Ensure the system and session buses are reachable",
            context={"operation": operation, "reason": reason}
        )


class SwayIPCError(BarError):
    """Sway IPC communication error."""

    def __init__(self, operation: str, reason: str):
        """
        Initialize Sway IPC error.

        Args:
            operation: IPC operation that failed
            reason: Reason for failure
        """
        super().__init__(
            code=ErrorCode.SWAY_IPC_FAILED,
            message=f"Sway IPC {operation} failed: {reason}",
            suggestion="Ensure Sway is running and IPC socket is accessible",
            context={"operation": operation, "reason": reason}
        )
