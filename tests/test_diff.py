"""Tests for the inventory diff engine."""

from __future__ import annotations

from collections import Counter

import pytest

from fenrir.diff import DiffOptions, Finding, FindingKind, InventoryDiffer, diff_inventories
from fenrir.inventory.models import FileRecord, Inventory

K = FindingKind


def _inv(root: str, **records: FileRecord) -> Inventory:
    inv = Inventory(root=root)
    for name, rec in records.items():
        inv.add(name.replace("__", "/"), rec)
    return inv


def _rec(digest: str | None = "d1", mode: int | None = 0o644, errors: tuple[str, ...] = ()) -> FileRecord:
    return FileRecord(digest=digest, permissions=mode, errors=errors)


def _kinds(findings: list[Finding]) -> Counter:
    return Counter((f.kind, f.path) for f in findings)


# ── End-to-end scenarios ─────────────────────────────────────────────


def test_identical_file_matches_on_both_axes():
    base = _inv("/b", a=_rec())
    target = _inv("/t", a=_rec())
    findings = list(diff_inventories(base, target))
    assert _kinds(findings) == Counter({(K.MATCHED_CONTENT, "a"): 1, (K.MATCHED_PERMISSIONS, "a"): 1})


def test_content_difference_is_one_checksum_conflict():
    base = _inv("/b", a=_rec("X"))
    target = _inv("/t", a=_rec("Y"))
    findings = list(diff_inventories(base, target))
    assert _kinds(findings) == Counter({(K.CHECKSUM_CONFLICT, "a"): 1, (K.MATCHED_PERMISSIONS, "a"): 1})
    conflict = next(f for f in findings if f.kind is K.CHECKSUM_CONFLICT)
    assert (conflict.base_digest, conflict.target_digest) == ("X", "Y")
    assert conflict.detail is None


def test_base_only():
    findings = list(diff_inventories(_inv("/b", b=_rec()), _inv("/t")))
    assert findings == [Finding(K.BASE_ONLY, "b")]


def test_target_only():
    findings = list(diff_inventories(_inv("/b"), _inv("/t", c=_rec())))
    assert findings == [Finding(K.TARGET_ONLY, "c")]


def test_permission_difference_with_same_content():
    base = _inv("/b", d=_rec(mode=0o644))
    target = _inv("/t", d=_rec(mode=0o600))
    findings = list(diff_inventories(base, target))
    assert _kinds(findings) == Counter({(K.MATCHED_CONTENT, "d"): 1, (K.PERMISSION_CONFLICT, "d"): 1})
    conflict = next(f for f in findings if f.kind is K.PERMISSION_CONFLICT)
    assert (conflict.base_permissions, conflict.target_permissions) == (0o644, 0o600)


def test_permission_exclusion_suppresses_only_permission_axis():
    base = _inv("/b", d=_rec(mode=0o644))
    target = _inv("/t", d=_rec(mode=0o600))
    findings = list(diff_inventories(base, target, perm_exclusions={"d"}))
    assert findings == [Finding(K.MATCHED_CONTENT, "d", base_digest="d1", target_digest="d1")]


# ── Exclusions and options ───────────────────────────────────────────


@pytest.mark.parametrize("target_digest", ["d1", "other"])
def test_hash_exclusion_removes_all_content_findings(target_digest):
    base = _inv("/b", a=_rec("d1", 0o644))
    target = _inv("/t", a=_rec(target_digest, 0o600))
    findings = list(diff_inventories(base, target, hash_exclusions={"a"}))
    assert [f.kind for f in findings] == [K.PERMISSION_CONFLICT]


def test_hash_exclusion_suppresses_one_sided_by_default():
    base = _inv("/b", gone=_rec())
    target = _inv("/t", new=_rec())
    findings = list(diff_inventories(base, target, hash_exclusions={"gone", "new"}))
    assert findings == []


def test_one_sided_reported_when_suppression_disabled():
    base = _inv("/b", gone=_rec())
    target = _inv("/t", new=_rec())
    opts = DiffOptions(suppress_one_sided=False)
    findings = list(diff_inventories(base, target, hash_exclusions={"gone", "new"}, options=opts))
    assert _kinds(findings) == Counter({(K.TARGET_ONLY, "new"): 1, (K.BASE_ONLY, "gone"): 1})


def test_permission_exclusion_does_not_hide_one_sided():
    findings = list(diff_inventories(_inv("/b"), _inv("/t", new=_rec()), perm_exclusions={"new"}))
    assert findings == [Finding(K.TARGET_ONLY, "new")]


def test_ignore_hashes_skips_content_axis_everywhere():
    base = _inv("/b", a=_rec("X"), b=_rec("Y"))
    target = _inv("/t", a=_rec("Z"), b=_rec("Y"))
    findings = list(diff_inventories(base, target, options=DiffOptions(ignore_hashes=True)))
    assert {f.kind for f in findings} == {K.MATCHED_PERMISSIONS}


def test_ignore_permissions_skips_permission_axis():
    base = _inv("/b", a=_rec(mode=0o644))
    target = _inv("/t", a=_rec(mode=0o777))
    findings = list(diff_inventories(base, target, options=DiffOptions(ignore_permissions=True)))
    assert [f.kind for f in findings] == [K.MATCHED_CONTENT]


def test_one_sided_still_reported_when_both_axes_ignored():
    opts = DiffOptions(ignore_hashes=True, ignore_permissions=True)
    findings = list(diff_inventories(_inv("/b", x=_rec()), _inv("/t", y=_rec()), options=opts))
    assert _kinds(findings) == Counter({(K.TARGET_ONLY, "y"): 1, (K.BASE_ONLY, "x"): 1})


# ── Unavailable values ───────────────────────────────────────────────


def test_unreadable_target_digest_is_conflict_not_match():
    base = _inv("/b", a=_rec("d1"))
    target = _inv("/t", a=_rec(None, errors=("digest failed for a: denied",)))
    findings = list(diff_inventories(base, target))
    conflict = next(f for f in findings if f.kind is K.CHECKSUM_CONFLICT)
    assert "target digest unavailable" in conflict.detail
    assert "denied" in conflict.detail
    assert K.MATCHED_CONTENT not in {f.kind for f in findings}


def test_both_digests_unavailable_is_still_conflict():
    base = _inv("/b", a=_rec(None))
    target = _inv("/t", a=_rec(None))
    findings = list(diff_inventories(base, target))
    assert K.CHECKSUM_CONFLICT in {f.kind for f in findings}


def test_unreadable_permissions_is_conflict():
    base = _inv("/b", a=_rec(mode=None, errors=("permissions failed",)))
    target = _inv("/t", a=_rec(mode=0o644))
    findings = list(diff_inventories(base, target))
    conflict = next(f for f in findings if f.kind is K.PERMISSION_CONFLICT)
    assert conflict.detail.startswith("base permissions unavailable")


# ── Properties ───────────────────────────────────────────────────────


def _mixed_pair() -> tuple[Inventory, Inventory]:
    base = _inv(
        "/b",
        same=_rec("s"),
        changed=_rec("c1"),
        mode=_rec("m", 0o644),
        gone=_rec("g"),
        nested__deep=_rec("n"),
    )
    target = _inv(
        "/t",
        same=_rec("s"),
        changed=_rec("c2"),
        mode=_rec("m", 0o600),
        new=_rec("x"),
        nested__deep=_rec("n"),
    )
    return base, target


def test_each_path_classified_once_per_axis():
    base, target = _mixed_pair()
    findings = list(diff_inventories(base, target))
    counts = _kinds(findings)
    assert all(n == 1 for n in counts.values())
    assert counts[(K.CHECKSUM_CONFLICT, "changed")] == 1
    assert counts[(K.PERMISSION_CONFLICT, "mode")] == 1
    assert counts[(K.TARGET_ONLY, "new")] == 1
    assert counts[(K.BASE_ONLY, "gone")] == 1
    assert counts[(K.MATCHED_CONTENT, "nested/deep")] == 1


def test_diff_is_deterministic():
    base, target = _mixed_pair()
    differ = InventoryDiffer()
    first = Counter(differ.diff(base, target))
    second = Counter(differ.diff(base, target))
    assert first == second


def test_exclusion_is_idempotent_across_runs():
    base, target = _mixed_pair()
    runs = [list(diff_inventories(base, target, hash_exclusions={"changed"})) for _ in range(3)]
    for findings in runs:
        content = [f for f in findings if f.path == "changed" and f.kind in (K.CHECKSUM_CONFLICT, K.MATCHED_CONTENT)]
        assert content == []
    assert Counter(runs[0]) == Counter(runs[1]) == Counter(runs[2])


def test_diff_is_lazy():
    base, target = _mixed_pair()
    it = diff_inventories(base, target)
    first = next(it)
    assert isinstance(first, Finding)
