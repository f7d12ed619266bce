"""End-to-end report generation.

``generate_report`` runs one single-pass pipeline: scan comment blocks,
collect and parse annotations, resolve the catalog for the referenced
categories, assemble markdown, then render it to HTML. Every external
collaborator (catalog, git, renderer, viewer) can be injected.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping

from complyscan.annotation_parser import parse_annotations
from complyscan.assembler import RenderContext, assemble_report
from complyscan.catalog import CatalogSource, resolve_catalog, source_from_settings
from complyscan.collector import collect_all
from complyscan.config import (
    CatalogSettings,
    ReportSettings,
    catalog_defaults,
    report_defaults,
)
from complyscan.manifest import package_name
from complyscan.model import AnnotationRecord, TagKind
from complyscan.render import view_html, write_html
from complyscan.scanner import scan_comment_blocks
from complyscan.vcs import git_branch, git_remote


@dataclass(frozen=True)
class CollectedRecords:
    records: Mapping[TagKind, tuple[AnnotationRecord, ...]]
    diagnostics: tuple[str, ...] = ()

    def all_records(self) -> list[AnnotationRecord]:
        return [record for kind in TagKind.ordered() for record in self.records.get(kind, ())]


@dataclass(frozen=True)
class ReportResult:
    lines: tuple[str, ...]
    package: str
    remote: str | None
    branch: str
    records: Mapping[TagKind, tuple[AnnotationRecord, ...]] = field(default_factory=dict)
    missing: Mapping[str, list[str]] = field(default_factory=dict)
    diagnostics: tuple[str, ...] = ()
    file: Path | None = None

    def markdown(self) -> str:
        return "\n".join(self.lines) + "\n"


def collect_records(root: Path, settings: ReportSettings) -> CollectedRecords:
    scan = scan_comment_blocks(
        root,
        source_dirs=settings.source_dirs,
        suffixes=settings.suffixes,
    )
    raw = collect_all(scan.blocks)
    records = {
        kind: tuple(parse_annotations(raw.get(kind, ()), strict=settings.strict_annotations))
        for kind in TagKind.ordered()
    }
    return CollectedRecords(records=records, diagnostics=scan.diagnostics)


def _resolve_root(path: Path | str) -> Path:
    root = Path(path)
    if str(path) == ".":
        root = Path.cwd()
    return root.resolve()


def generate_report(
    path: Path | str = ".",
    branch: str | None = None,
    view: bool = True,
    *,
    settings: ReportSettings | None = None,
    catalog_source: CatalogSource | None = None,
    config_path: Path | None = None,
    remote_fn: Callable[[Path], str | None] = git_remote,
    branch_fn: Callable[[Path, str | None], str] = git_branch,
    render_fn: Callable[..., Path] = write_html,
    view_fn: Callable[[Path], None] = view_html,
) -> ReportResult:
    root = _resolve_root(path)
    if settings is None:
        settings = ReportSettings.from_config(report_defaults(root, config_path))
    if catalog_source is None:
        catalog_source = source_from_settings(
            CatalogSettings.from_config(catalog_defaults(root, config_path), root=root)
        )

    remote = remote_fn(root)
    resolved_branch = branch_fn(root, branch)

    collected = collect_records(root, settings)
    catalog = resolve_catalog(collected.all_records(), catalog_source)
    package = package_name(root)
    assembled = assemble_report(
        collected.records,
        catalog,
        package=package,
        ctx=RenderContext(
            remote=remote,
            branch=resolved_branch,
            remote_view=settings.remote_view,
        ),
        title=settings.title,
        reference_url=settings.reference_url,
    )

    rendered = render_fn(assembled.lines, title=f"{settings.title} for {package}")
    file: Path | None = None
    if view:
        view_fn(rendered)
    else:
        file = rendered

    return ReportResult(
        lines=assembled.lines,
        package=package,
        remote=remote,
        branch=resolved_branch,
        records=collected.records,
        missing=assembled.missing,
        diagnostics=collected.diagnostics,
        file=file,
    )
