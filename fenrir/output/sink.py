"""Finding sink interface and generic sinks."""

from __future__ import annotations

from collections import Counter
from typing import Protocol, runtime_checkable

from fenrir.diff.models import Finding, FindingKind


@runtime_checkable
class FindingSink(Protocol):
    """Anything that consumes findings one at a time."""

    def emit(self, finding: Finding) -> None: ...


class CollectingSink:
    """Keeps every finding in memory."""

    def __init__(self) -> None:
        self.findings: list[Finding] = []

    def emit(self, finding: Finding) -> None:
        self.findings.append(finding)

    def of_kind(self, kind: FindingKind) -> list[Finding]:
        return [f for f in self.findings if f.kind is kind]

    def counts(self) -> Counter[FindingKind]:
        return Counter(f.kind for f in self.findings)


class CompositeSink:
    """Fans each finding out to several sinks, in order."""

    def __init__(self, *sinks: FindingSink) -> None:
        self.sinks = list(sinks)

    def emit(self, finding: Finding) -> None:
        for sink in self.sinks:
            sink.emit(finding)
