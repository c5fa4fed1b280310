from __future__ import annotations

"""Subprocess execution.

CONTRACT
- Inputs: argv list, cwd, env overrides, timeout
- Outputs (required):
  - CmdResult(returncode, stdout, stderr, elapsed_s)
- Invariants:
  - No shell: argv is executed as given
  - stdio is inherited unless `capture=True`
  - Respects timeout_s (returncode 124 when exceeded)
- Failure:
  - Never raises; missing binaries yield returncode 127
"""

import os
import shlex
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path

from loguru import logger


def which(cmd: str) -> str | None:
    for p in os.environ.get("PATH", "").split(os.pathsep):
        candidate = Path(p) / cmd
        if candidate.exists() and os.access(candidate, os.X_OK):
            return str(candidate)
    return None


@dataclass(frozen=True)
class CmdResult:
    cmd: str
    returncode: int
    stdout: str
    stderr: str
    elapsed_s: float


def run_cmd(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    timeout_s: float | None = None,
    capture: bool = False,
) -> CmdResult:
    """Run a command, optionally capturing its output.

    `env` entries are layered over the current environment.
    """
    cmd_str = shlex.join(cmd)
    logger.debug(f"Running: {cmd_str} (cwd={cwd})")

    start_t = time.time()
    stdout = stderr = ""
    try:
        p = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=(os.environ | env) if env else None,
            capture_output=capture,
            timeout=timeout_s,
            text=True,
        )
        rc = p.returncode
        if capture:
            stdout, stderr = p.stdout or "", p.stderr or ""
    except subprocess.TimeoutExpired:
        rc = 124
        stderr = "Timeout expired."
    except OSError as e:
        rc = 127
        stderr = str(e)

    return CmdResult(
        cmd=cmd_str,
        returncode=rc,
        stdout=stdout,
        stderr=stderr,
        elapsed_s=time.time() - start_t,
    )
