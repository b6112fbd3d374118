"""Diff engine, findings and exclusion sets."""

from fenrir.diff.engine import InventoryDiffer, diff_inventories
from fenrir.diff.exclusions import load_exclusions, normalize_exclusions, read_exclusion_file
from fenrir.diff.models import DiffOptions, Finding, FindingKind

__all__ = [
    "DiffOptions",
    "Finding",
    "FindingKind",
    "InventoryDiffer",
    "diff_inventories",
    "load_exclusions",
    "normalize_exclusions",
    "read_exclusion_file",
]
