"""
Notifier factory.

This module selects the notifier for the current platform once, at
construction time.
"""

import sys

import structlog

from ..exceptions import ConfigurationError
from .base import Notifier
from .linux import LinuxNotifier
from .log import LogNotifier
from .macos import MacOSNotifier
from .windows import WindowsNotifier

logger = structlog.get_logger(__name__)

_BACKENDS: dict[str, type[Notifier]] = {
    "macos": MacOSNotifier,
    "linux": LinuxNotifier,
    "windows": WindowsNotifier,
    "log": LogNotifier,
}


class NotifierFactory:
    """Factory for creating the notifier matching a backend or platform."""

    @staticmethod
    def backend_for_platform(platform: str) -> str:
        """
        Map a ``sys.platform`` value to a notifier backend.

        Raises:
            ConfigurationError: If the platform has no notifier
        """
        if platform == "darwin":
            return "macos"
        if platform in ("win32", "cygwin"):
            return "windows"
        if platform.startswith("linux"):
            return "linux"
        raise ConfigurationError(
            f"Unsupported operating system: {platform}",
            context={"platform": platform},
        )

    @staticmethod
    def create_notifier(
        backend: str = "auto", platform: str | None = None, **kwargs: float
    ) -> Notifier:
        """
        Create a notifier.

        Args:
            backend: Backend name, or 'auto' to select by platform
            platform: Platform name, defaults to ``sys.platform``
            **kwargs: Options passed to the notifier (e.g. timeout)

        Returns:
            Notifier instance

        Raises:
            ConfigurationError: If the backend or platform is not supported
        """
        backend = backend.lower()
        if backend == "auto":
            backend = NotifierFactory.backend_for_platform(platform or sys.platform)

        notifier_class = _BACKENDS.get(backend)
        if notifier_class is None:
            raise ConfigurationError(
                f"Unknown notifier backend: {backend}. "
                f"Supported backends: {', '.join(NotifierFactory.get_supported_backends())}",
                context={"backend": backend},
            )

        logger.info("Notifier selected", backend=backend)
        return notifier_class(**kwargs)

    @staticmethod
    def get_supported_backends() -> list[str]:
        """Get list of supported notifier backends."""
        return ["auto", *_BACKENDS]
