"""prop-store: edit `key=value` property files behind a read-only mount.

- `store`: reads, and privileged upserts bracketed by remount rw/ro
- `runtime`: the root helper process and single-shot commands
- `device`: screen classification and the LCD density workflow
- `cli`: the `propctl` command
"""

__all__ = [
    "cli",
    "config",
    "device",
    "runtime",
    "store",
]
