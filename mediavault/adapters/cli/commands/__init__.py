"""Sous-package CLI commands - re-exporte les commandes publiques."""

from mediavault.adapters.cli.commands.cache_commands import (
    cache_stats,
    gc,
    verify,
)
from mediavault.adapters.cli.commands.recycle_commands import (
    recycle,
    recycle_list,
    recycle_purge,
    recycle_restore,
)
from mediavault.adapters.cli.commands.scan_commands import (
    display_result,
    process,
    restore,
    scan,
)

__all__ = [
    "cache_stats",
    "display_result",
    "gc",
    "process",
    "recycle",
    "recycle_list",
    "recycle_purge",
    "recycle_restore",
    "restore",
    "scan",
    "verify",
]
