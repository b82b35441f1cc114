from __future__ import annotations

import argparse
import logging
from pathlib import Path

from prop_store.config import CONFIG_ENV_VAR, ConfigError, load_config
from prop_store.device.density import DensityController, reboot, restart_ui
from prop_store.device.screen import DeviceProfile, read_display
from prop_store.store import files
from prop_store.store.config_store import PrivilegedConfigStore

_CONFIG_HELP = f"YAML/JSON store config (default: ${CONFIG_ENV_VAR}, else built-in defaults)."


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="propctl",
        description="Read and edit build.prop-style property files via a root helper.",
    )
    parser.add_argument("--config", type=Path, default=None, help=_CONFIG_HELP)
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="cmd", required=True)

    get_p = sub.add_parser("get", help="Print a property value.")
    get_p.add_argument("key", type=str)
    get_p.add_argument("--file", type=str, default=None, help="Property file (default: primary).")
    get_p.add_argument(
        "--runtime",
        action="store_true",
        help="Query the running system (getprop) instead of the file.",
    )

    set_p = sub.add_parser("set", help="Update or append key=value.")
    set_p.add_argument("key", type=str)
    set_p.add_argument("value", type=str)
    set_p.add_argument("--file", type=str, default=None, help="Property file (default: primary).")
    set_p.add_argument(
        "--to_data",
        action="store_true",
        help="Also write the secondary override file (e.g. /data/local.prop).",
    )

    list_p = sub.add_parser("list", help="Print every key=value in a property file.")
    list_p.add_argument("--file", type=str, default=None, help="Property file (default: primary).")

    dens_p = sub.add_parser("density", help="Show or set the LCD density property.")
    dens_p.add_argument("value", nargs="?", default=None)
    dens_p.add_argument(
        "--reboot", action="store_true", help="Reboot when the density actually changed."
    )

    sub.add_parser("device_type", help="Classify the device as phone, hybrid or tablet.")
    sub.add_parser("restart_ui", help="Restart SystemUI and Settings.")
    return parser


def main() -> int:
    parser = _build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"invalid config:\n{e}")
        return 2

    store = PrivilegedConfigStore(config)

    if args.cmd == "get":
        if args.runtime:
            value = store.query_runtime_property(args.key)
        else:
            value = store.get_property(args.key, args.file)
        if value is None:
            print(f"{args.key}: not set")
            return 1
        print(value)
        return 0

    if args.cmd == "set":
        try:
            if args.file is None:
                ok = store.set_property(args.key, args.value, to_data=args.to_data)
            else:
                ok = store.upsert_property(args.file, args.key, args.value, args.to_data)
        except ValueError as e:
            print(str(e))
            return 2
        return 0 if ok else 1

    if args.cmd == "list":
        path = args.file or config.primary_file
        for key, value in files.parse_properties(store.read_file(path)).items():
            print(f"{key}={value}")
        return 0

    if args.cmd == "density":
        density = DensityController(store)
        if args.value is None:
            current = density.current()
            print(current if current is not None else f"{density.property_name}: not set")
            return 0 if current is not None else 1
        value = density.clamp(args.value)
        changed = density.apply(value)
        print(f"{density.property_name}={value}" + (" (changed)" if changed else ""))
        if changed and args.reboot:
            return 0 if reboot(store.shell) else 1
        return 0

    if args.cmd == "device_type":
        info = read_display(store.shell)
        if info is None:
            print("unable to read display geometry")
            return 1
        print(DeviceProfile(info).device_type)
        return 0

    if args.cmd == "restart_ui":
        return 0 if restart_ui(store.shell) else 1

    raise SystemExit(f"unknown subcommand: {args.cmd}")  # pragma: no cover


if __name__ == "__main__":
    raise SystemExit(main())
