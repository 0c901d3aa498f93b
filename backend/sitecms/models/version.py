# sitecms/models/version.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class VersionEntry:
    """Metadata for one snapshot of a section. Immutable once written."""

    id: str
    created_at: str
    created_by: str
    size: int
    note: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "createdAt": self.created_at,
            "createdBy": self.created_by,
            "size": self.size,
        }
        if self.note is not None:
            data["note"] = self.note
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VersionEntry":
        return cls(
            id=data["id"],
            created_at=data["createdAt"],
            created_by=data["createdBy"],
            size=int(data.get("size", 0)),
            note=data.get("note"),
        )


@dataclass
class VersionIndex:
    """Per-section version log, newest first."""

    section: str
    versions: List[VersionEntry] = field(default_factory=list)

    def prepend(self, entry: VersionEntry) -> None:
        self.versions.insert(0, entry)

    def truncate(self, max_versions: int) -> List[VersionEntry]:
        """Drop the oldest entries beyond max_versions and return them."""
        evicted = self.versions[max_versions:]
        self.versions = self.versions[:max_versions]
        return evicted

    def to_dict(self) -> Dict[str, Any]:
        return {
            "section": self.section,
            "versions": [entry.to_dict() for entry in self.versions],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VersionIndex":
        return cls(
            section=data["section"],
            versions=[VersionEntry.from_dict(item) for item in data.get("versions", [])],
        )
