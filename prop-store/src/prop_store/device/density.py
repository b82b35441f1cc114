"""LCD density property workflow plus the UI restart / reboot helpers."""

from __future__ import annotations

import logging
from typing import Optional

from prop_store.config import DensityConfig
from prop_store.runtime.shell import PrivilegedShell
from prop_store.store.config_store import PrivilegedConfigStore

logger = logging.getLogger(__name__)

UI_PROCESSES = ("com.android.systemui", "com.android.settings")


class DensityController:
    def __init__(
        self, store: PrivilegedConfigStore, config: Optional[DensityConfig] = None
    ) -> None:
        self._store = store
        self._cfg = config or store.config.density

    @property
    def property_name(self) -> str:
        return self._cfg.property

    def current(self) -> Optional[str]:
        return self._store.query_runtime_property(self._cfg.property)

    def clamp(self, raw: object) -> int:
        """Parse a user-entered density, falling back to the default and clamping."""

        try:
            value = int(str(raw).strip())
        except (TypeError, ValueError):
            logger.warning("invalid density %r, using default %d", raw, self._cfg.default)
            value = self._cfg.default
        return max(self._cfg.min, min(self._cfg.max, value))

    def apply(self, value: int | str) -> bool:
        """Persist the density; True when it differs from the running value."""

        before = self.current()
        self._store.set_property(self._cfg.property, str(value))
        changed = before != str(value)
        if changed:
            logger.info("%s: %s -> %s (reboot required)", self._cfg.property, before, value)
        return changed


def restart_ui(shell: PrivilegedShell) -> bool:
    ok = True
    for proc in UI_PROCESSES:
        ok = shell.run_privileged([f"pkill -TERM -f {proc}"]) and ok
    return ok


def reboot(shell: PrivilegedShell) -> bool:
    logger.warning("rebooting device")
    return shell.run_privileged(["reboot"])
