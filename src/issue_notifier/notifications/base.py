"""
Base notifier abstract class.

This module defines the interface that all platform notifiers must implement.
"""

import asyncio
import os
from abc import ABC, abstractmethod

import structlog

from ..exceptions import SinkError

logger = structlog.get_logger(__name__)


class Notifier(ABC):
    """
    Abstract base class for notification sinks.

    A notifier has a single capability: show a title, a message and a link
    to the user. Failures are reported as :class:`SinkError`.
    """

    name: str = ""

    def __init__(self, timeout: float = 10.0):
        """
        Initialize the notifier.

        Args:
            timeout: Maximum time to wait for the notification command (seconds)
        """
        self.timeout = timeout

    @abstractmethod
    async def notify(self, title: str, message: str, url: str) -> None:
        """
        Display a notification.

        Args:
            title: Notification title
            message: Notification body
            url: Link to open from the notification

        Raises:
            SinkError: If the notification could not be displayed
        """
        pass

    async def run_command(
        self, cmd: list[str], env: dict[str, str] | None = None
    ) -> str:
        """
        Run a notification command.

        Args:
            cmd: Command and arguments
            env: Extra environment variables for the command

        Returns:
            Standard output of the command

        Raises:
            SinkError: If the command is missing, fails or times out
        """
        logger.debug(
            "Running notification command", notifier=self.name, command=cmd[0]
        )

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env={**os.environ, **env} if env else None,
            )
        except FileNotFoundError as e:
            raise SinkError(
                f"{cmd[0]} not found",
                notifier=self.name,
                context={"command": cmd[0], "missing": True},
            ) from e
        except OSError as e:
            raise SinkError(
                f"Failed to run {cmd[0]}: {e}",
                notifier=self.name,
                context={"command": cmd[0]},
            ) from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            process.kill()
            await process.wait()
            raise SinkError(
                f"{cmd[0]} timed out after {self.timeout}s",
                notifier=self.name,
                context={"command": cmd[0]},
            ) from e

        if process.returncode != 0:
            raise SinkError(
                f"{cmd[0]} exited with status {process.returncode}: "
                f"{stderr.decode('utf-8', errors='replace').strip()}",
                notifier=self.name,
                context={"command": cmd[0], "returncode": process.returncode},
            )

        return stdout.decode("utf-8", errors="replace")
