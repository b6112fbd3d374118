"""fenrir: directory-tree integrity comparator."""

from fenrir.diff import DiffOptions, Finding, FindingKind, diff_inventories, load_exclusions
from fenrir.errors import ConfigurationError, FenrirError, FileReadError, RootWalkError
from fenrir.inventory import FileRecord, Inventory, build_inventory
from fenrir.verifier import VerificationReport, Verifier, verify

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "DiffOptions",
    "FenrirError",
    "FileReadError",
    "FileRecord",
    "Finding",
    "FindingKind",
    "Inventory",
    "RootWalkError",
    "VerificationReport",
    "Verifier",
    "build_inventory",
    "diff_inventories",
    "load_exclusions",
    "verify",
]
