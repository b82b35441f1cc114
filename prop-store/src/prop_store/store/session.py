"""Remount-writable / remount-read-only bracketing around a privileged edit.

A `PrivilegeSession` is not long-lived: each `held()` or `batch()` block is
one elevation. In both forms the read-only remount is attempted on every
exit path, including when the mutation itself failed.
"""

from __future__ import annotations

import contextlib
import logging
from typing import Iterator, List, Optional

from prop_store.runtime.shell import PrivilegedShell, ShellResult

logger = logging.getLogger(__name__)


class PrivilegeSession:
    def __init__(
        self,
        shell: PrivilegedShell,
        mount_point: str,
        *,
        remount_rw: Optional[str] = None,
        remount_ro: Optional[str] = None,
    ) -> None:
        cfg = shell.config
        self._shell = shell
        self.mount_point = mount_point
        self.remount_rw = remount_rw or cfg.remount_command(mount_point, writable=True)
        self.remount_ro = remount_ro or cfg.remount_command(mount_point, writable=False)
        self.last_result: Optional[ShellResult] = None

    def _release(self) -> None:
        res = self._shell.execute([self.remount_ro])
        if not res.ok():
            logger.error(
                "remount read-only of %s failed (status=%s); it may remain writable",
                self.mount_point,
                res.status,
            )

    @contextlib.contextmanager
    def held(self) -> Iterator[None]:
        """Keep the mount writable for the duration of the block."""

        res = self._shell.execute([self.remount_rw])
        if not res.ok():
            logger.warning(
                "remount read-write of %s did not succeed (status=%s)",
                self.mount_point,
                res.status,
            )
        try:
            yield
        finally:
            self._release()

    @contextlib.contextmanager
    def batch(self) -> Iterator[List[str]]:
        """Collect commands and run them as one bracketed privileged batch.

        The remount-writable command opens the batch and the remount-read-only
        command closes it. Each command records a non-zero exit status in `rc`
        and the batch exits with it, so a failed mutation is reported even
        though the read-only remount after it succeeds. When the batch does
        not complete cleanly a standalone read-only remount follows.
        """

        commands: List[str] = []
        yield commands

        lines = [
            self.remount_rw,
            "rc=0",
            *(f"{cmd} || rc=$?" for cmd in commands),
            f"{self.remount_ro} || rc=$?",
            "exit $rc",
        ]
        res = self._shell.execute(lines)
        self.last_result = res
        if not res.ok():
            logger.warning(
                "privileged batch on %s did not succeed (status=%s); releasing mount",
                self.mount_point,
                res.status,
            )
            self._release()
