"""Classify every relative path of two inventories into findings."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Set

from fenrir.diff.models import DiffOptions, Finding, FindingKind
from fenrir.inventory.models import FileRecord


def _unavailable(side: str, record: FileRecord, what: str) -> str:
    reason = "; ".join(record.errors) or "not read"
    return f"{side} {what} unavailable ({reason})"


class InventoryDiffer:
    """Joins a base and a target inventory on relative path.

    Pass A walks the target: paths present in both trees are compared on
    the content and permission axes independently, paths missing from the
    base are TARGET_ONLY. Pass B walks the base for BASE_ONLY paths.
    Findings are yielded lazily so callers can stream them to a sink.
    """

    def __init__(self, options: DiffOptions | None = None) -> None:
        self.options = options or DiffOptions()

    def diff(
        self,
        base: Mapping[str, FileRecord],
        target: Mapping[str, FileRecord],
        hash_exclusions: Set[str] = frozenset(),
        perm_exclusions: Set[str] = frozenset(),
    ) -> Iterator[Finding]:
        opts = self.options

        # Pass A: target against base
        for path in sorted(target):
            t_rec = target[path]
            b_rec = base.get(path)
            if b_rec is None:
                if not (opts.suppress_one_sided and path in hash_exclusions):
                    yield Finding(FindingKind.TARGET_ONLY, path)
                continue

            if not opts.ignore_hashes and path not in hash_exclusions:
                yield self._compare_content(path, b_rec, t_rec)
            if not opts.ignore_permissions and path not in perm_exclusions:
                yield self._compare_permissions(path, b_rec, t_rec)

        # Pass B: base entries with no target counterpart
        for path in sorted(base):
            if path in target:
                continue
            if opts.suppress_one_sided and path in hash_exclusions:
                continue
            yield Finding(FindingKind.BASE_ONLY, path)

    @staticmethod
    def _compare_content(path: str, b_rec: FileRecord, t_rec: FileRecord) -> Finding:
        kind = FindingKind.CHECKSUM_CONFLICT
        detail: str | None = None
        if b_rec.digest is None:
            detail = _unavailable("base", b_rec, "digest")
        elif t_rec.digest is None:
            detail = _unavailable("target", t_rec, "digest")
        elif b_rec.digest == t_rec.digest:
            kind = FindingKind.MATCHED_CONTENT
        return Finding(
            kind,
            path,
            base_digest=b_rec.digest,
            target_digest=t_rec.digest,
            detail=detail,
        )

    @staticmethod
    def _compare_permissions(path: str, b_rec: FileRecord, t_rec: FileRecord) -> Finding:
        kind = FindingKind.PERMISSION_CONFLICT
        detail: str | None = None
        if b_rec.permissions is None:
            detail = _unavailable("base", b_rec, "permissions")
        elif t_rec.permissions is None:
            detail = _unavailable("target", t_rec, "permissions")
        elif b_rec.permissions == t_rec.permissions:
            kind = FindingKind.MATCHED_PERMISSIONS
        return Finding(
            kind,
            path,
            base_permissions=b_rec.permissions,
            target_permissions=t_rec.permissions,
            detail=detail,
        )


def diff_inventories(
    base: Mapping[str, FileRecord],
    target: Mapping[str, FileRecord],
    hash_exclusions: Set[str] = frozenset(),
    perm_exclusions: Set[str] = frozenset(),
    options: DiffOptions | None = None,
) -> Iterator[Finding]:
    """Convenience wrapper around InventoryDiffer().diff()."""
    return InventoryDiffer(options).diff(base, target, hash_exclusions, perm_exclusions)
