"""s101.errors

Exception types raised by the runner.

Every failure that should abort a run derives from :class:`S101Error` so the
CLI can turn it into a clean non-zero exit. The underlying exception (usually an
``OSError``) is always chained via ``raise ... from exc``.
"""

from __future__ import annotations

from typing import Optional


class S101Error(RuntimeError):
    """Base class for fatal runner errors."""


class ConfigurationError(S101Error):
    """Settings are missing, malformed or inconsistent."""


class MirrorError(S101Error):
    """Copying a directory tree failed part-way through."""


class ManifestReadError(S101Error):
    """The dependency manifest exists but could not be read."""


class InstallError(S101Error):
    """Downloading, unpacking or inspecting the Structure101 install failed."""


class AnalyzerFailedError(S101Error):
    """The headless analyzer exited with a non-zero status."""

    def __init__(self, exit_code: int, *, log_path: Optional[str] = None) -> None:
        msg = f"Structure101 analysis failed with exit code {exit_code}"
        if log_path:
            msg += f" (see log: {log_path})"
        super().__init__(msg)
        self.exit_code = exit_code
        self.log_path = log_path
