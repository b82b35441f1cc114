"""Device type (phone / hybrid / tablet) from screen geometry.

The type is derived from an explicit `DisplayInfo`; `read_display` builds
one from `wm size`, `wm density` and the `tablet_ui_enabled` system setting.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, Optional, Tuple

from prop_store.runtime.shell import PrivilegedShell

DeviceType = Literal["phone", "hybrid", "tablet"]

DENSITY_DEFAULT = 160
PHONE_MAX_DP = 600


@dataclass(frozen=True)
class DisplayInfo:
    width_px: int
    height_px: int
    density_dpi: int
    tablet_ui_enabled: bool = True

    @property
    def short_side_dp(self) -> int:
        short = min(self.width_px, self.height_px)
        return short * DENSITY_DEFAULT // self.density_dpi


def classify_device(info: DisplayInfo) -> DeviceType:
    if info.tablet_ui_enabled:
        return "tablet"
    if info.short_side_dp < PHONE_MAX_DP:
        # 0-599dp: separate status & navigation bar
        return "phone"
    # 600dp+ with tablet UI switched off
    return "hybrid"


class DeviceProfile:
    """Device type computed once from a `DisplayInfo`."""

    def __init__(self, info: DisplayInfo) -> None:
        self.info = info
        self.device_type: DeviceType = classify_device(info)

    def is_phone(self) -> bool:
        return self.device_type == "phone"

    def is_hybrid(self) -> bool:
        return self.device_type == "hybrid"

    def is_tablet(self) -> bool:
        return self.device_type == "tablet"


def _parse_wm_size(txt: str) -> Optional[Tuple[int, int]]:
    override = re.search(r"Override size:\s*(\d+)x(\d+)", txt)
    physical = re.search(r"Physical size:\s*(\d+)x(\d+)", txt)
    m = override or physical
    if not m:
        return None
    return int(m.group(1)), int(m.group(2))


def _parse_wm_density(txt: str) -> Optional[int]:
    override = re.search(r"Override density:\s*(\d+)", txt)
    physical = re.search(r"Physical density:\s*(\d+)", txt)
    m = override or physical
    return int(m.group(1)) if m else None


def _parse_tablet_ui(txt: str) -> bool:
    # unset setting reads back as "null"; the legacy default is enabled
    raw = txt.strip()
    if not raw or raw == "null":
        return True
    try:
        return int(raw) != 0
    except ValueError:
        return True


def read_display(shell: PrivilegedShell) -> Optional[DisplayInfo]:
    size = shell.run_command(["wm", "size"])
    density = shell.run_command(["wm", "density"])
    if not (size.ok() and density.ok()):
        return None

    dims = _parse_wm_size(size.stdout)
    dpi = _parse_wm_density(density.stdout)
    if dims is None or not dpi:
        return None

    tablet = shell.run_command(["settings", "get", "system", "tablet_ui_enabled"])
    enabled = _parse_tablet_ui(tablet.stdout if tablet.ok() else "")
    return DisplayInfo(
        width_px=dims[0],
        height_px=dims[1],
        density_dpi=dpi,
        tablet_ui_enabled=enabled,
    )
