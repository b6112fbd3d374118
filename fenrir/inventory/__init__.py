"""Tree inventories: relative path -> (digest, permission bits)."""

from fenrir.inventory.builder import InventoryBuilder, build_inventory
from fenrir.inventory.hasher import compute_file_digest, compute_hash, read_permissions
from fenrir.inventory.models import EntryError, FileRecord, Inventory, normalize_relpath

__all__ = [
    "EntryError",
    "FileRecord",
    "Inventory",
    "InventoryBuilder",
    "build_inventory",
    "compute_file_digest",
    "compute_hash",
    "normalize_relpath",
    "read_permissions",
]
