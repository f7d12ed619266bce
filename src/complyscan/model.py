from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping

STANDARD_ID_PATTERN = r"[A-Z]+[0-9]+\.[0-9][0-9]?[a-z]?"
_PREFIX_RE = re.compile(r"^(?P<prefix>[A-Z]+)")

ROOT_DIRECTORY = "root"
UNKNOWN_FILE = "<unknown file>"


class TagKind(Enum):
    ADDRESSED = "srrstats"
    NOT_APPLICABLE = "srrstatsNA"
    PENDING = "srrstatsTODO"

    @property
    def tag(self) -> str:
        return self.value

    @classmethod
    def ordered(cls) -> tuple["TagKind", ...]:
        return (cls.ADDRESSED, cls.NOT_APPLICABLE, cls.PENDING)


def standard_prefix(standard_id: str) -> str:
    match = _PREFIX_RE.match(standard_id)
    return match.group("prefix") if match else ""


def order_standard_ids(ids: Iterable[str]) -> tuple[str, ...]:
    """Deduplicate ``ids`` and sort them with ``G`` identifiers first."""
    unique = set(ids)
    general = sorted(item for item in unique if item.startswith("G"))
    other = sorted(item for item in unique if not item.startswith("G"))
    return tuple(general + other)


def directory_label(path: str) -> str:
    parts = [part for part in path.split("/") if part and part != "."]
    if len(parts) < 2:
        return ROOT_DIRECTORY
    return parts[0]


@dataclass(frozen=True)
class CommentBlock:
    path: str
    line: int
    lines: tuple[tuple[int, str], ...]
    function_name: str | None = None


@dataclass(frozen=True)
class RawAnnotation:
    tag_kind: TagKind
    text: str
    directory: str = ROOT_DIRECTORY


@dataclass(frozen=True)
class AnnotationRecord:
    tag_kind: TagKind
    standard_ids: tuple[str, ...]
    source_file: str | None = None
    function_name: str | None = None
    line_number: int | None = None
    directory: str = ROOT_DIRECTORY

    def resolved_ids(self, catalog: "Catalog") -> tuple[str, ...]:
        return tuple(item for item in self.standard_ids if item in catalog)


@dataclass(frozen=True)
class CatalogEntry:
    id: str
    description: str
    category: str


@dataclass(frozen=True)
class Catalog:
    entries: tuple[CatalogEntry, ...] = ()
    _index: Mapping[str, CatalogEntry] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        index: dict[str, CatalogEntry] = {}
        kept: list[CatalogEntry] = []
        for entry in self.entries:
            if entry.id in index:
                continue
            index[entry.id] = entry
            kept.append(entry)
        object.__setattr__(self, "entries", tuple(kept))
        object.__setattr__(self, "_index", index)

    def __contains__(self, standard_id: object) -> bool:
        return standard_id in self._index

    def description(self, standard_id: str) -> str:
        return self._index[standard_id].description

    def ids(self) -> tuple[str, ...]:
        return tuple(entry.id for entry in self.entries)

    def ids_by_category(self) -> dict[str, list[str]]:
        grouped: dict[str, list[str]] = {}
        for entry in self.entries:
            grouped.setdefault(entry.category, []).append(entry.id)
        return grouped
