"""Adaptadores de notificación de reset de password."""

from .logging_notifier import LoggingResetNotifier

__all__ = ["LoggingResetNotifier"]
