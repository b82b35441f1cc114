"""Device helpers built on the store: screen classification and density."""

from __future__ import annotations

from prop_store.device.density import DensityController, reboot, restart_ui
from prop_store.device.screen import (
    DeviceProfile,
    DeviceType,
    DisplayInfo,
    classify_device,
    read_display,
)

__all__ = [
    "DensityController",
    "DeviceProfile",
    "DeviceType",
    "DisplayInfo",
    "classify_device",
    "read_display",
    "reboot",
    "restart_ui",
]
