"""tools/structure101/runner.py

Tool-specific execution plumbing for the Structure101 headless analyzer.

Command shape::

    java -Ds101.label=<label> -jar <inst>/structure101-java-build.jar <build>/s101/config.xml

run with the installation directory as working directory. Output goes to
``<build>/s101.log`` (the analyzer is chatty and its output is mostly useful
after a failure).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

from s101.domain.run_context import LABEL_ENV_VAR, LABEL_PROPERTY, RunContext
from s101.io.layout import RUN_LOG_FILENAME

from tools.core_cmd import CmdResult, run_cmd, which_or_raise


def java_fallbacks() -> List[str]:
    java_home = os.environ.get("JAVA_HOME")
    if not java_home:
        return []
    exe = "java.exe" if os.name == "nt" else "java"
    return [str(Path(java_home) / "bin" / exe)]


def build_analyzer_command(java_bin: str, ctx: RunContext) -> List[str]:
    return [
        java_bin,
        f"-D{LABEL_PROPERTY}={ctx.label}",
        "-jar",
        str(ctx.build_jar),
        str(ctx.staged.config),
    ]


class Structure101Analyzer:
    """Runs the headless analyzer synchronously."""

    def __init__(self, *, java: Optional[str] = None) -> None:
        self._java = java

    def java_bin(self) -> str:
        if self._java:
            return self._java
        return which_or_raise("java", fallbacks=java_fallbacks())

    def run(self, ctx: RunContext) -> CmdResult:
        cmd = build_analyzer_command(self.java_bin(), ctx)
        print(f"\n🔍 Running Structure101 ({ctx.label}) ...")
        print("Command:", " ".join(cmd))
        return run_cmd(
            cmd,
            cwd=ctx.installation_dir,
            env={LABEL_ENV_VAR: ctx.label},
            log_path=ctx.build_dir / RUN_LOG_FILENAME,
        )
