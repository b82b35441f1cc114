"""Helper-process runtime (root shell and single-shot commands)."""

from __future__ import annotations

from prop_store.runtime.shell import PrivilegedShell, ShellResult, ShellStatus

__all__ = [
    "PrivilegedShell",
    "ShellResult",
    "ShellStatus",
]
