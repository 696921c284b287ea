"""
Notification sinks and dispatch for the GitHub issue notifier.

This package contains the notifier interface, one implementation per
platform, the factory that selects between them, and the dispatcher that
formats and throttles notifications.
"""

from .base import Notifier
from .dispatcher import NotificationDispatcher
from .factory import NotifierFactory
from .linux import LinuxNotifier
from .log import LogNotifier
from .macos import MacOSNotifier
from .windows import WindowsNotifier

__all__ = [
    "LinuxNotifier",
    "LogNotifier",
    "MacOSNotifier",
    "NotificationDispatcher",
    "Notifier",
    "NotifierFactory",
    "WindowsNotifier",
]
