"""tools/structure101

Structure101 adapter package.

The orchestrator only knows three capabilities (install, configure, run). This
package provides the real implementations: installer + configurer + analyzer
runner.
"""

from __future__ import annotations

from .configurer import Structure101Configurer, read_build_version
from .installer import DOWNLOAD_URL_DEFAULT, Structure101Installer, unpack_archive
from .runner import Structure101Analyzer, build_analyzer_command

__all__ = [
    "DOWNLOAD_URL_DEFAULT",
    "Structure101Analyzer",
    "Structure101Configurer",
    "Structure101Installer",
    "build_analyzer_command",
    "read_build_version",
    "unpack_archive",
]
