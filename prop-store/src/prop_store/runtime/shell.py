"""Helper-process execution.

Two channels are used by the store:
  * the privileged helper (`su` by default): a root shell driven by writing
    one command per line to its stdin and closing it
  * single-shot unprivileged commands (`getprop`, `wm`, `settings`) whose
    stdout is read back

Neither channel raises. Launch errors and timeouts are logged and reported
through `ShellResult.status`.
"""

from __future__ import annotations

import logging
import subprocess
import time
from dataclasses import dataclass
from typing import Literal, Optional, Sequence

from prop_store.config import StoreConfig

logger = logging.getLogger(__name__)

ShellStatus = Literal["launch_failed", "timed_out", "exited_nonzero", "succeeded"]


@dataclass(frozen=True)
class ShellResult:
    args: list[str]
    stdout: str
    stderr: str
    returncode: Optional[int]
    status: ShellStatus

    @property
    def launched(self) -> bool:
        """True when the helper was spawned and ran to completion."""

        return self.status in ("exited_nonzero", "succeeded")

    def ok(self) -> bool:
        return self.status == "succeeded"

    def first_line(self) -> Optional[str]:
        lines = self.stdout.splitlines()
        return lines[0] if lines else None


def _run(
    cmd: list[str], *, stdin_text: Optional[str], timeout_s: Optional[float]
) -> ShellResult:
    try:
        proc = subprocess.run(
            cmd,
            input=stdin_text,
            capture_output=True,
            text=True,
            timeout=timeout_s,
        )
    except subprocess.TimeoutExpired:
        logger.error("helper process timed out after %ss: %s", timeout_s, " ".join(cmd))
        return ShellResult(args=cmd, stdout="", stderr="", returncode=None, status="timed_out")
    except (OSError, ValueError) as e:
        logger.error("failed to launch helper process %s: %s", " ".join(cmd), e)
        return ShellResult(
            args=cmd, stdout="", stderr=str(e), returncode=None, status="launch_failed"
        )

    status: ShellStatus = "succeeded" if proc.returncode == 0 else "exited_nonzero"
    return ShellResult(
        args=cmd,
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
        returncode=proc.returncode,
        status=status,
    )


class PrivilegedShell:
    """Thin wrapper around the root helper process and plain commands."""

    def __init__(self, config: Optional[StoreConfig] = None) -> None:
        self._config = config or StoreConfig()

    @property
    def config(self) -> StoreConfig:
        return self._config

    def execute(self, command_lines: Sequence[str], *, delay_ms: int = 0) -> ShellResult:
        """Send a batch of commands to one privileged helper and wait for it to exit."""

        if delay_ms > 0:
            time.sleep(delay_ms / 1000.0)

        payload = "".join(f"{line}\n" for line in command_lines)
        cmd = list(self._config.privileged_command)
        logger.debug("privileged batch (%d lines): %r", len(command_lines), list(command_lines))
        result = _run(cmd, stdin_text=payload, timeout_s=self._config.timeout_s)
        if result.status == "exited_nonzero":
            logger.warning(
                "privileged batch exited rc=%s: %s",
                result.returncode,
                (result.stderr or "").strip()[:500],
            )
        return result

    def run_privileged(self, command_lines: Sequence[str], delay_ms: int = 0) -> bool:
        """Whether the helper was launched and communicated with.

        This does not reflect the outcome of the individual commands; use
        `execute` for the exit status.
        """

        return self.execute(command_lines, delay_ms=delay_ms).launched

    def run_command(self, args: Sequence[str]) -> ShellResult:
        cmd = [str(a) for a in args]
        return _run(cmd, stdin_text=None, timeout_s=self._config.timeout_s)

    def query_runtime_property(self, name: str) -> Optional[str]:
        res = self.run_command([*self._config.getprop_command, name])
        if not res.launched:
            return None
        return res.first_line()
