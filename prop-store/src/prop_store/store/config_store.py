"""Privileged `key=value` config store.

`PrivilegedConfigStore` reads property files directly and performs every
mutation of a protected file through the privileged helper, inside a
`PrivilegeSession` for the mount that contains it.

In-place updates replace only the first line starting with `key=`; new keys
are appended with a leading newline so they always start on their own line.
The in-place edit relies on `sed -i` with a `0,/re/` address (GNU sed and
busybox sed both accept it).
"""

from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from prop_store.config import StoreConfig
from prop_store.runtime.shell import PrivilegedShell, ShellResult
from prop_store.store import files
from prop_store.store.session import PrivilegeSession

logger = logging.getLogger(__name__)

_BRE_SPECIAL = set("\\.*[]^$")
# leading newline so the entry starts on its own line
_APPEND_FORMAT = "\\n%s"


def _shell_cmd(*parts: str) -> str:
    return " ".join(shlex.quote(str(p)) for p in parts)


def _sed_regex(text: str, *, delim: str) -> str:
    return "".join("\\" + c if c in _BRE_SPECIAL or c == delim else c for c in text)


def _sed_replacement(text: str, *, delim: str) -> str:
    return "".join("\\" + c if c in {"\\", "&", delim} else c for c in text)


def _validate_entry(key: str, value: str) -> None:
    if not key or "=" in key or any(c in key for c in "\r\n"):
        raise ValueError(f"invalid property key: {key!r}")
    if any(c in value for c in "\r\n"):
        raise ValueError(f"property value for {key!r} must be a single line")


class PrivilegedConfigStore:
    """Read, create and upsert property files behind a read-only mount."""

    def __init__(
        self,
        config: Optional[StoreConfig] = None,
        *,
        shell: Optional[PrivilegedShell] = None,
    ) -> None:
        self._config = config or (shell.config if shell is not None else StoreConfig())
        self._shell = shell or PrivilegedShell(self._config)

    @property
    def config(self) -> StoreConfig:
        return self._config

    @property
    def shell(self) -> PrivilegedShell:
        return self._shell

    # ------------------------------- Reads -------------------------------

    def file_exists(self, path: str | Path) -> bool:
        return files.file_exists(path)

    def read_file(self, path: str | Path) -> str:
        return files.read_file(path)

    def read_one_line(self, path: str | Path) -> Optional[str]:
        return files.read_one_line(path)

    def get_property(self, key: str, path: str | Path | None = None) -> Optional[str]:
        target = self._config.primary_file if path is None else path
        return files.find_property(files.read_file(target), key)

    # ------------------------------- Writes ------------------------------

    def session_for(self, path: str | Path) -> Optional[PrivilegeSession]:
        mount = self._config.mount_for(str(path))
        if mount is None:
            return None
        return PrivilegeSession(self._shell, mount)

    def write_lines(self, path: str | Path, lines: Iterable[str]) -> None:
        """Overwrite `path` with `lines`; best-effort, failures are only logged."""

        session = self.session_for(path)
        try:
            if session is None:
                files.write_lines_unchecked(path, lines)
                return
            with session.held():
                files.write_lines_unchecked(path, lines)
        except Exception:
            logger.exception("failed to write %s", path)

    def _edit_commands(self, path: str, key: str, value: str, *, present: bool) -> List[str]:
        cfg = self._config
        entry = f"{key}={value}"
        if present:
            expr = "0,/^{addr}=/s|^{pat}=.*|{repl}|".format(
                addr=_sed_regex(key, delim="/"),
                pat=_sed_regex(key, delim="|"),
                repl=_sed_replacement(entry, delim="|"),
            )
            return [_shell_cmd(*cfg.tool("sed"), "-i", expr, path)]
        append = _shell_cmd(*cfg.tool("printf"), _APPEND_FORMAT, entry)
        return [f"{append} >> {shlex.quote(path)}"]

    def _apply(self, path: str, commands: Sequence[str], *, chmod: bool) -> Optional[ShellResult]:
        cmds = list(commands)
        if chmod:
            cmds.append(_shell_cmd(*self._config.tool("chmod"), "644", path))

        session = self.session_for(path)
        if session is None:
            return self._shell.execute(cmds)
        with session.batch() as batch:
            batch.extend(cmds)
        return session.last_result

    def upsert_property(
        self,
        path: str | Path,
        key: str,
        value: str,
        also_write_secondary: bool = False,
    ) -> bool:
        """Set `key=value` in `path`, replacing the first `key=` line or appending.

        Returns whether every privileged batch completed cleanly. Callers that
        only need the legacy fire-and-forget behaviour can ignore it.
        """

        value = str(value)
        _validate_entry(key, value)
        target = str(path)

        present = files.has_key(files.read_file(target), key)
        logger.info(
            "%s %s=%s in %s", "updating" if present else "appending", key, value, target
        )
        res = self._apply(
            target, self._edit_commands(target, key, value, present=present), chmod=True
        )
        ok = res is not None and res.ok()

        if also_write_secondary:
            ok = self._upsert_secondary(key, value) and ok
        return ok

    def _upsert_secondary(self, key: str, value: str) -> bool:
        secondary = self._config.secondary_file
        if not files.file_exists(secondary):
            self.write_lines(secondary, [f"{key}={value}"])
            return files.file_exists(secondary)

        present = files.has_key(files.read_file(secondary), key)
        res = self._apply(
            secondary, self._edit_commands(secondary, key, value, present=present), chmod=False
        )
        return res is not None and res.ok()

    def set_property(self, key: str, value: str, to_data: bool = False) -> bool:
        return self.upsert_property(self._config.primary_file, key, value, to_data)

    # --------------------------- Helper processes -------------------------

    def run_privileged(self, command_lines: Sequence[str], delay_ms: int = 0) -> bool:
        return self._shell.run_privileged(command_lines, delay_ms)

    def query_runtime_property(self, name: str) -> Optional[str]:
        return self._shell.query_runtime_property(name)
