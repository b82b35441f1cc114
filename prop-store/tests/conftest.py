from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest


def _ensure_src_on_path() -> None:
    project_root = Path(__file__).resolve().parents[1]
    src_str = str(project_root / "src")
    if src_str not in sys.path:
        sys.path.insert(0, src_str)

    # Shared fakes live under `tests/unit/`.
    unit_root = Path(__file__).resolve().parent / "unit"
    unit_root_str = str(unit_root)
    if unit_root.is_dir() and unit_root_str not in sys.path:
        sys.path.insert(0, unit_root_str)


_ensure_src_on_path()


@pytest.fixture
def device_root(tmp_path: Path) -> Path:
    """A fake device tree: <tmp>/system (protected) and <tmp>/data (unprotected)."""

    (tmp_path / "system").mkdir()
    (tmp_path / "data").mkdir()
    return tmp_path


@pytest.fixture
def sh_config(device_root: Path):
    """Config that runs batches through /bin/sh with no-op remount commands."""

    from prop_store.config import StoreConfig

    return StoreConfig(
        privileged_command=("sh",),
        getprop_command=("echo",),
        busybox="",
        protected_mounts=(str(device_root / "system"),),
        remount_rw=": remount rw {mount}",
        remount_ro=": remount ro {mount}",
        primary_file=str(device_root / "system" / "build.prop"),
        secondary_file=str(device_root / "data" / "local.prop"),
    )


@pytest.fixture
def batch_spy(monkeypatch) -> list[dict]:
    """Record every subprocess.run call (argv + stdin) and still run it."""

    calls: list[dict] = []
    real_run = subprocess.run

    def spy_run(cmd, **kwargs):
        calls.append({"cmd": list(cmd), "input": kwargs.get("input")})
        return real_run(cmd, **kwargs)

    monkeypatch.setattr(subprocess, "run", spy_run)
    return calls
