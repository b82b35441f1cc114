"""Property file store: unprivileged reads, privileged remount-bracketed writes."""

from __future__ import annotations

from prop_store.store.config_store import PrivilegedConfigStore
from prop_store.store.files import (
    file_exists,
    find_property,
    has_key,
    parse_properties,
    read_file,
    read_one_line,
    write_one_line,
)
from prop_store.store.session import PrivilegeSession

__all__ = [
    "PrivilegeSession",
    "PrivilegedConfigStore",
    "file_exists",
    "find_property",
    "has_key",
    "parse_properties",
    "read_file",
    "read_one_line",
    "write_one_line",
]
