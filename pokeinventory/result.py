"""Command result handling for pokeinventory."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pokeinventory.config import LOGGER


class MessageType(Enum):
    """Types of messages that can be logged."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"


@dataclass
class CommandResult:
    """Outcome of a command: a mutation issued by a service or a CLI handler."""

    success: bool
    message: str | None = None
    message_type: MessageType = MessageType.INFO
    data: Any = None

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1

    def log(self) -> None:
        """Log the message if present."""
        if not self.message:
            return

        if self.message_type == MessageType.ERROR:
            LOGGER.error(self.message)
        elif self.message_type == MessageType.WARNING:
            LOGGER.warning(self.message)
        elif self.message_type == MessageType.SUCCESS:
            LOGGER.info(f"✓ {self.message}")
        else:
            LOGGER.info(self.message)


def success(message: str | None = None, data: Any = None) -> CommandResult:
    return CommandResult(
        success=True,
        message=message,
        message_type=MessageType.SUCCESS if message else MessageType.INFO,
        data=data,
    )


def error(message: str, data: Any = None) -> CommandResult:
    return CommandResult(
        success=False, message=message, message_type=MessageType.ERROR, data=data
    )


def warning(message: str, data: Any = None) -> CommandResult:
    """Create a warning result (successful but with warning)."""
    return CommandResult(
        success=True, message=message, message_type=MessageType.WARNING, data=data
    )


def info(message: str, data: Any = None) -> CommandResult:
    return CommandResult(
        success=True, message=message, message_type=MessageType.INFO, data=data
    )
