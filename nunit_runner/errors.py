from typing import Any, Dict, Optional


class RunnerError(RuntimeError):
    """
    Base error for the report converter and the runner client. Carries metadata for logging.
    """

    category: str = "runtime"

    def __init__(self, message: str, *, metadata: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.metadata = metadata or {}


class UsageError(RunnerError):
    """Raised when command-line arguments are wrong."""

    category = "usage"


class ConfigError(RunnerError):
    """Raised when a configuration value is invalid."""

    category = "config"


class InputNotFound(RunnerError, FileNotFoundError):
    """Raised when a source file does not exist."""

    category = "input"


class MalformedInput(RunnerError, ValueError):
    """Raised when an XML result document cannot be parsed or lacks required attributes."""

    category = "input"


class RunnerConnectionError(RunnerError, ConnectionError):
    """Raised when the TCP connection to the remote runner cannot be opened."""

    category = "connection"


class ProtocolError(RunnerError):
    """Raised when the remote runner closes the stream early or stops answering."""

    category = "protocol"

    def __init__(self, message: str, *, last_line: Optional[str] = None, metadata: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, metadata=metadata)
        self.last_line = last_line

    def __str__(self) -> str:
        base = super().__str__()
        if self.last_line is None:
            return base
        return f"{base} (last line received: {self.last_line!r})"
