"""
Windows notifier.

Shows a balloon tip through PowerShell and System.Windows.Forms. Text is
passed through environment variables so it is never parsed as script.
"""

from .base import Notifier

BALLOON_SCRIPT = """
Add-Type -AssemblyName System.Windows.Forms
Add-Type -AssemblyName System.Drawing
$icon = New-Object System.Windows.Forms.NotifyIcon
$icon.Icon = [System.Drawing.SystemIcons]::Information
$icon.BalloonTipTitle = $env:ISSUE_NOTIFIER_TITLE
$icon.BalloonTipText = $env:ISSUE_NOTIFIER_MESSAGE
$icon.Visible = $true
$icon.ShowBalloonTip(5000)
Start-Sleep -Seconds 3
$icon.Dispose()
"""


class WindowsNotifier(Notifier):
    """Desktop notifications for Windows via a PowerShell balloon tip."""

    name = "windows"

    async def notify(self, title: str, message: str, url: str) -> None:
        await self.run_command(
            [
                "powershell",
                "-NoProfile",
                "-NonInteractive",
                "-Command",
                BALLOON_SCRIPT,
            ],
            env={
                "ISSUE_NOTIFIER_TITLE": title,
                "ISSUE_NOTIFIER_MESSAGE": f"{message}\n\nClick to open: {url}",
            },
        )
