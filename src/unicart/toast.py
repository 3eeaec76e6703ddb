"""User-facing notifications.

Presentation code plugs in its own :class:`Notifier`; the default
:class:`LogNotifier` writes toasts to the ``unicart.toast`` logger.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

_logger = logging.getLogger(__name__)


class ToastLevel(StrEnum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


_LOG_LEVELS: dict[ToastLevel, int] = {
    ToastLevel.SUCCESS: logging.INFO,
    ToastLevel.INFO: logging.INFO,
    ToastLevel.WARNING: logging.WARNING,
    ToastLevel.ERROR: logging.ERROR,
}


class Toast(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    level: ToastLevel = ToastLevel.INFO
    duration: float = Field(default=3.0, gt=0, description="Seconds the toast stays visible")


class Notifier(Protocol):
    def notify(self, toast: Toast) -> None: ...


class LogNotifier:
    """Writes each toast as a log record."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or _logger

    def notify(self, toast: Toast) -> None:
        self._logger.log(_LOG_LEVELS[toast.level], "[%s] %s", toast.level.upper(), toast.message)


class RecordingNotifier:
    """Keeps every toast in :attr:`toasts`, newest last."""

    def __init__(self) -> None:
        self.toasts: list[Toast] = []

    def notify(self, toast: Toast) -> None:
        self.toasts.append(toast)

    @property
    def messages(self) -> list[str]:
        return [toast.message for toast in self.toasts]

    def clear(self) -> None:
        self.toasts.clear()


def toast(notifier: Notifier, message: str, level: ToastLevel = ToastLevel.INFO) -> Toast:
    item = Toast(message=message, level=level)
    notifier.notify(item)
    return item
