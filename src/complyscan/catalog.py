from __future__ import annotations

import re
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Protocol, Sequence

from complyscan.config import DEFAULT_CATALOG_TIMEOUT, DEFAULT_CATALOG_URL, CatalogSettings
from complyscan.exceptions import CatalogUnavailableError
from complyscan.model import (
    AnnotationRecord,
    Catalog,
    CatalogEntry,
    TagKind,
    standard_prefix,
)

# Prefix table, in canonical category order.
STANDARD_CATEGORIES: tuple[tuple[str, str], ...] = (
    ("G", "general"),
    ("BS", "bayesian"),
    ("EA", "eda"),
    ("ML", "ml"),
    ("RE", "regression"),
    ("SP", "spatial"),
    ("TS", "time-series"),
    ("UL", "unsupervised"),
    ("PD", "distributions"),
)
_CATEGORY_BY_PREFIX = dict(STANDARD_CATEGORIES)
_CATEGORY_ORDER = {category: index for index, (_, category) in enumerate(STANDARD_CATEGORIES)}

_CHECKLIST_RE = re.compile(r"^\s?-\s\[\s\]\s\*\*(?P<id>[^*]+)\*\*\s?(?P<text>.*)$")
_BOOK_ITEM_RE = re.compile(r"^\s*[-*]\s+\*\*(?P<id>[A-Z]+[0-9]+\.[0-9][^*]*)\*\*\s*(?P<text>.*)$")


class CatalogSource(Protocol):
    def fetch(self, categories: Sequence[str]) -> list[str]:
        """Return checklist lines ``- [ ] **<id>** <text>`` for ``categories``."""
        ...


def category_for(standard_id: str) -> str | None:
    return _CATEGORY_BY_PREFIX.get(standard_prefix(standard_id))


def categories_for(records: Iterable[AnnotationRecord]) -> list[str]:
    found: set[str] = set()
    for record in records:
        if record.tag_kind is TagKind.PENDING:
            continue
        for standard_id in record.standard_ids:
            category = category_for(standard_id)
            if category is not None:
                found.add(category)
    return sorted(found, key=_CATEGORY_ORDER.__getitem__)


def checklist_lines(text: str) -> list[str]:
    """Normalize standards markdown into checklist lines.

    Items already in checklist form are kept as-is; bold-identifier list items
    (``- **G1.0** text``) are converted.
    """
    lines: list[str] = []
    for raw in text.splitlines():
        if _CHECKLIST_RE.match(raw):
            lines.append(raw.strip())
            continue
        match = _BOOK_ITEM_RE.match(raw)
        if match is None:
            continue
        lines.append(f"- [ ] **{match.group('id').strip()}** {match.group('text').strip()}")
    return lines


def parse_checklist(lines: Iterable[str]) -> Catalog:
    entries: list[CatalogEntry] = []
    for line in lines:
        match = _CHECKLIST_RE.match(line)
        if match is None:
            continue
        standard_id = match.group("id").strip()
        description = re.sub(r"^\*|\*$", "", match.group("text").strip()).strip()
        entries.append(
            CatalogEntry(
                id=standard_id,
                description=description,
                category=category_for(standard_id) or standard_prefix(standard_id).lower(),
            )
        )
    return Catalog(entries=tuple(entries))


def resolve_catalog(
    records: Iterable[AnnotationRecord],
    source: CatalogSource,
) -> Catalog:
    categories = categories_for(records)
    if not categories:
        return Catalog()
    return parse_checklist(source.fetch(categories))


@dataclass(frozen=True)
class HttpCatalogSource:
    base_url: str = DEFAULT_CATALOG_URL
    timeout: float = DEFAULT_CATALOG_TIMEOUT
    file_suffix: str = ".Rmd"
    urlopen_fn: Callable[..., object] = field(default=urllib.request.urlopen, compare=False)

    def url_for(self, category: str) -> str:
        return f"{self.base_url.rstrip('/')}/{category}{self.file_suffix}"

    def fetch(self, categories: Sequence[str]) -> list[str]:
        lines: list[str] = []
        for category in categories:
            url = self.url_for(category)
            try:
                req = urllib.request.Request(url, headers={"Accept": "text/plain"})
                with self.urlopen_fn(req, timeout=self.timeout) as response:
                    text = response.read().decode("utf-8")
            except (urllib.error.URLError, OSError, UnicodeDecodeError) as exc:
                raise CatalogUnavailableError(
                    f"unable to fetch '{category}' standards from {url}: {exc}",
                    source=url,
                ) from exc
            lines.extend(checklist_lines(text))
        return lines


@dataclass(frozen=True)
class DirectoryCatalogSource:
    directory: Path
    suffixes: tuple[str, ...] = (".md", ".Rmd")

    def fetch(self, categories: Sequence[str]) -> list[str]:
        lines: list[str] = []
        for category in categories:
            path = self._locate(category)
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise CatalogUnavailableError(
                    f"unable to read '{category}' standards from {path}: {exc}",
                    source=str(path),
                ) from exc
            lines.extend(checklist_lines(text))
        return lines

    def _locate(self, category: str) -> Path:
        for suffix in self.suffixes:
            candidate = self.directory / f"{category}{suffix}"
            if candidate.is_file():
                return candidate
        return self.directory / f"{category}{self.suffixes[0]}"


def source_from_settings(settings: CatalogSettings) -> CatalogSource:
    if settings.directory is not None:
        return DirectoryCatalogSource(settings.directory)
    return HttpCatalogSource(base_url=settings.base_url, timeout=settings.timeout)
