"""Store configuration (helper commands, mount layout, file locations).

Configuration files are YAML or JSON objects validated against the bundled
`schemas/store_config.schema.json`. Anything not set falls back to the
defaults below, which match a stock rooted Android device with busybox.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml
from jsonschema import Draft202012Validator

CONFIG_ENV_VAR = "PROPSTORE_CONFIG"

_SCHEMA_PATH = Path(__file__).resolve().parent / "schemas" / "store_config.schema.json"


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class DensityConfig:
    property: str = "ro.sf.lcd_density"
    min: int = 180
    max: int = 280
    default: int = 213


@dataclass(frozen=True)
class StoreConfig:
    privileged_command: Tuple[str, ...] = ("su",)
    getprop_command: Tuple[str, ...] = ("getprop",)
    busybox: str = "busybox"
    protected_mounts: Tuple[str, ...] = ("/system",)
    remount_rw: str = "{busybox} mount -o rw,remount {mount}"
    remount_ro: str = "{busybox} mount -o ro,remount {mount}"
    primary_file: str = "/system/build.prop"
    secondary_file: str = "/data/local.prop"
    timeout_s: Optional[float] = None
    density: DensityConfig = field(default_factory=DensityConfig)

    def tool(self, name: str) -> list[str]:
        """Argv prefix for a busybox applet (plain `name` when busybox is unset)."""

        return [self.busybox, name] if self.busybox else [name]

    def remount_command(self, mount: str, *, writable: bool) -> str:
        template = self.remount_rw if writable else self.remount_ro
        return template.format(busybox=self.busybox, mount=mount).strip()

    def mount_for(self, path: str) -> Optional[str]:
        """Return the protected mount containing `path`, if any."""

        target = os.path.normpath(str(path))
        for mount in self.protected_mounts:
            root = os.path.normpath(mount)
            if target == root or target.startswith(root.rstrip("/") + "/"):
                return mount
        return None


def load_yaml_or_json(path: Path) -> Dict[str, Any]:
    """Load a YAML/JSON config file; the top level must be an object."""

    if not path.exists():
        raise ConfigError(f"config file not found: {path}")

    try:
        if path.suffix.lower() in {".yaml", ".yml"}:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        elif path.suffix.lower() == ".json":
            data = json.loads(path.read_text(encoding="utf-8"))
        else:
            raise ConfigError(f"Unsupported config file extension: {path}")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"failed to parse {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Top-level config must be an object: {path}")
    return data


def load_schema(schema_path: Path = _SCHEMA_PATH) -> Dict[str, Any]:
    schema = json.loads(schema_path.read_text(encoding="utf-8"))
    if not isinstance(schema, dict):
        raise ConfigError(f"Schema must be an object: {schema_path}")
    return schema


def validate_config(data: Mapping[str, Any], *, where: str) -> None:
    validator = Draft202012Validator(load_schema())
    errors = sorted(validator.iter_errors(dict(data)), key=lambda e: list(e.path))
    if errors:
        msgs = []
        for e in errors[:20]:
            loc = "/".join([str(p) for p in e.path])
            msgs.append(f"- {where}:{loc}: {e.message}")
        if len(errors) > 20:
            msgs.append(f"... ({len(errors)-20} more)")
        raise ConfigError("\n".join(msgs))


def config_from_mapping(data: Mapping[str, Any], *, where: str = "<config>") -> StoreConfig:
    validate_config(data, where=where)

    cfg = StoreConfig()
    updates: Dict[str, Any] = {}
    for key in ("privileged_command", "getprop_command", "protected_mounts"):
        if key in data:
            updates[key] = tuple(str(x) for x in data[key])
    for key in ("busybox", "remount_rw", "remount_ro", "primary_file", "secondary_file"):
        if key in data:
            updates[key] = str(data[key])
    if "timeout_s" in data:
        updates["timeout_s"] = None if data["timeout_s"] is None else float(data["timeout_s"])
    if "density" in data:
        density = dict(data["density"])
        if int(density.get("min", cfg.density.min)) > int(density.get("max", cfg.density.max)):
            raise ConfigError(f"- {where}:density: min must be <= max")
        updates["density"] = replace(cfg.density, **density)
    return replace(cfg, **updates)


def load_config(path: Optional[Path] = None) -> StoreConfig:
    """Resolve configuration: explicit path, then $PROPSTORE_CONFIG, then defaults."""

    if path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if not env_path:
            return StoreConfig()
        path = Path(env_path)
    path = Path(path)
    return config_from_mapping(load_yaml_or_json(path), where=str(path))
