from __future__ import annotations

from typing import AbstractSet, Mapping

from complyscan.model import Catalog
from complyscan.report_doc import ReportDoc


def missing_standards(catalog: Catalog, rendered_ids: AbstractSet[str]) -> dict[str, list[str]]:
    """Catalog identifiers absent from ``rendered_ids``, grouped by category.

    Only identifiers that were resolved and rendered count as present, so
    anything dropped while parsing or filtering is reported as missing.
    Categories keep catalog order.
    """
    grouped: dict[str, list[str]] = {}
    for category, ids in catalog.ids_by_category().items():
        missing = [standard_id for standard_id in ids if standard_id not in rendered_ids]
        if missing:
            grouped[category] = missing
    return grouped


def category_heading(category: str) -> str:
    return f"{category.title()} standards:"


def missing_section(missing: Mapping[str, list[str]]) -> list[str]:
    if not missing:
        return []
    doc = ReportDoc()
    doc.line()
    doc.header(2, "Missing Standards")
    doc.line()
    doc.line("The following standards are missing:")
    for category, ids in missing.items():
        doc.line()
        doc.line(category_heading(category))
        doc.line()
        doc.line(", ".join(ids))
        doc.line()
    return doc.emit()
