"""Finding types produced by the diff engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FindingKind(str, Enum):
    MATCHED_CONTENT = "matched_content"
    MATCHED_PERMISSIONS = "matched_permissions"
    CHECKSUM_CONFLICT = "checksum_conflict"
    PERMISSION_CONFLICT = "permission_conflict"
    TARGET_ONLY = "target_only"
    BASE_ONLY = "base_only"

    @property
    def is_alert(self) -> bool:
        return self not in (FindingKind.MATCHED_CONTENT, FindingKind.MATCHED_PERMISSIONS)


@dataclass(frozen=True)
class Finding:
    """Classification of one relative path on one comparison axis."""

    kind: FindingKind
    path: str
    base_digest: str | None = None
    target_digest: str | None = None
    base_permissions: int | None = None
    target_permissions: int | None = None
    # Set when a conflict comes from an unreadable value rather than a mismatch
    detail: str | None = None


@dataclass(frozen=True)
class DiffOptions:
    """Per-run switches for the diff engine."""

    ignore_hashes: bool = False
    ignore_permissions: bool = False
    suppress_one_sided: bool = True
