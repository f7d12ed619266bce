from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from complyscan.config import DEFAULT_REFERENCE_URL, DEFAULT_TITLE
from complyscan.missing import missing_section, missing_standards
from complyscan.model import UNKNOWN_FILE, AnnotationRecord, Catalog, TagKind
from complyscan.report_doc import ReportDoc


@dataclass(frozen=True)
class RenderContext:
    remote: str | None = None
    branch: str = ""
    remote_view: str = "blob"

    def file_url(self, path: str, line: int | None) -> str | None:
        if self.remote is None:
            return None
        url = f"{self.remote}/{self.remote_view}/{self.branch}/{path}"
        if line is not None:
            url = f"{url}#L{line}"
        return url


@dataclass(frozen=True)
class AssembledReport:
    lines: tuple[str, ...]
    missing: Mapping[str, list[str]]

    def text(self) -> str:
        return "\n".join(self.lines) + "\n"


def record_header(record: AnnotationRecord, ctx: RenderContext) -> str:
    clauses: list[str] = []
    if record.function_name is not None:
        clauses.append(f"in function '{record.function_name}'")
    if record.line_number is not None:
        clauses.append(f"on line#{record.line_number}")
    if record.source_file is None:
        location = UNKNOWN_FILE
    else:
        url = ctx.file_url(record.source_file, record.line_number)
        location = ReportDoc.link(record.source_file, url)
    clauses.append(("of file " if clauses else "in file ") + location)
    return "Standards " + " ".join(clauses) + ":"


def render_record(record: AnnotationRecord, catalog: Catalog, ctx: RenderContext) -> list[str]:
    doc = ReportDoc()
    doc.line(record_header(record, ctx))
    doc.bullets(
        f"{standard_id} {catalog.description(standard_id)}"
        for standard_id in record.resolved_ids(catalog)
    )
    return doc.emit()


def tag_section(
    tag_kind: TagKind,
    records: Sequence[AnnotationRecord],
    catalog: Catalog,
    ctx: RenderContext,
) -> list[str]:
    if not records:
        return []
    by_directory: dict[str, list[str]] = {}
    for record in records:
        by_directory.setdefault(record.directory, []).extend(render_record(record, catalog, ctx))
    doc = ReportDoc()
    doc.header(2, f"Standards with `{tag_kind.tag}` tag")
    doc.line()
    for directory, rendered in by_directory.items():
        doc.line()
        doc.header(3, f"{directory} directory")
        doc.line()
        doc.lines(rendered)
    doc.line()
    doc.rule()
    doc.line()
    return doc.emit()


def title_block(
    package: str,
    *,
    remote: str | None,
    title: str = DEFAULT_TITLE,
    reference_url: str = DEFAULT_REFERENCE_URL,
) -> list[str]:
    doc = ReportDoc()
    doc.header(1, f"{title} for {ReportDoc.link(package, remote)}")
    doc.line()
    doc.line(ReportDoc.link("Click here for full text of all standards", reference_url))
    doc.line()
    return doc.emit()


def rendered_standard_ids(
    records: Iterable[AnnotationRecord], catalog: Catalog
) -> frozenset[str]:
    return frozenset(
        standard_id for record in records for standard_id in record.resolved_ids(catalog)
    )


def assemble_report(
    records_by_kind: Mapping[TagKind, Sequence[AnnotationRecord]],
    catalog: Catalog,
    *,
    package: str,
    ctx: RenderContext,
    title: str = DEFAULT_TITLE,
    reference_url: str = DEFAULT_REFERENCE_URL,
) -> AssembledReport:
    doc = ReportDoc()
    doc.lines(title_block(package, remote=ctx.remote, title=title, reference_url=reference_url))
    rendered: set[str] = set()
    for tag_kind in TagKind.ordered():
        records = list(records_by_kind.get(tag_kind, ()))
        doc.lines(tag_section(tag_kind, records, catalog, ctx))
        rendered.update(rendered_standard_ids(records, catalog))
    missing = missing_standards(catalog, rendered)
    doc.lines(missing_section(missing))
    return AssembledReport(
        lines=tuple(doc.emit()),
        missing=missing,
    )
