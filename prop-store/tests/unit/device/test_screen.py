from __future__ import annotations

import pytest
from fakes import FakeShell

from prop_store.device.screen import DeviceProfile, DisplayInfo, classify_device, read_display


@pytest.mark.parametrize(
    "info, expected",
    [
        (DisplayInfo(480, 800, 240, tablet_ui_enabled=False), "phone"),
        (DisplayInfo(1080, 1920, 160, tablet_ui_enabled=False), "hybrid"),
        (DisplayInfo(800, 1280, 160, tablet_ui_enabled=False), "hybrid"),
        (DisplayInfo(1200, 1920, 400, tablet_ui_enabled=False), "phone"),
        (DisplayInfo(480, 800, 240, tablet_ui_enabled=True), "tablet"),
    ],
)
def test_classify_device(info: DisplayInfo, expected: str) -> None:
    assert classify_device(info) == expected


def test_short_side_dp_uses_default_density_scale() -> None:
    assert DisplayInfo(600, 1024, 160).short_side_dp == 600
    assert DisplayInfo(1080, 2400, 480).short_side_dp == 360


def test_device_profile_is_computed_once_per_display() -> None:
    phone = DeviceProfile(DisplayInfo(720, 1280, 320, tablet_ui_enabled=False))
    tablet = DeviceProfile(DisplayInfo(720, 1280, 320))

    assert phone.is_phone() and not phone.is_tablet() and not phone.is_hybrid()
    assert tablet.is_tablet()


def test_read_display_prefers_override_values() -> None:
    shell = FakeShell(
        outputs={
            ("wm", "size"): "Physical size: 1080x1920\nOverride size: 720x1280\n",
            ("wm", "density"): "Physical density: 480\nOverride density: 320\n",
            ("settings", "get", "system", "tablet_ui_enabled"): "0\n",
        }
    )

    info = read_display(shell)

    assert info == DisplayInfo(720, 1280, 320, tablet_ui_enabled=False)


def test_read_display_defaults_tablet_ui_to_enabled() -> None:
    shell = FakeShell(
        outputs={
            ("wm", "size"): "Physical size: 1080x1920\n",
            ("wm", "density"): "Physical density: 480\n",
            ("settings", "get", "system", "tablet_ui_enabled"): "null\n",
        }
    )
    info = read_display(shell)
    assert info is not None and info.tablet_ui_enabled is True

    unreadable = FakeShell(
        outputs={
            ("wm", "size"): "Physical size: 1080x1920\n",
            ("wm", "density"): "Physical density: 480\n",
        }
    )
    info = read_display(unreadable)
    assert info is not None and info.tablet_ui_enabled is True


def test_read_display_none_without_geometry() -> None:
    assert read_display(FakeShell()) is None
    garbled = FakeShell(outputs={("wm", "size"): "???", ("wm", "density"): "Physical density: 0"})
    assert read_display(garbled) is None
