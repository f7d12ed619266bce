from __future__ import annotations

import json
from pathlib import Path
from typing import List, Mapping, Optional

import typer

from complyscan.catalog import CatalogSource, source_from_settings
from complyscan.config import (
    CatalogSettings,
    ReportSettings,
    TomlTable,
    catalog_defaults,
    merge_payload,
    report_defaults,
)
from complyscan.exceptions import ComplyscanError
from complyscan.manifest import package_name
from complyscan.model import TagKind
from complyscan.report import ReportResult, collect_records, generate_report
from complyscan.schema import AnnotationRecordDTO, AnnotationsResponse, ReportPayloadDTO

app = typer.Typer(add_completion=False, help="Standards compliance reports from annotations.")

_INJECTABLE_REPORT_KEYS = ("catalog_source", "remote_fn", "branch_fn", "render_fn", "view_fn")


def _context_report_overrides(ctx: typer.Context) -> dict[str, object]:
    obj = ctx.obj
    if not isinstance(obj, Mapping):
        return {}
    return {key: obj[key] for key in _INJECTABLE_REPORT_KEYS if obj.get(key) is not None}


def _report_settings(
    root: Path,
    config: Path | None,
    *,
    source_dir: List[str],
    strict: bool | None,
) -> ReportSettings:
    payload: TomlTable = {
        "source_dirs": list(source_dir) or None,
        "strict_annotations": strict,
    }
    return ReportSettings.from_config(merge_payload(payload, report_defaults(root, config)))


def _catalog_source(
    root: Path,
    config: Path | None,
    *,
    catalog_dir: Path | None,
    catalog_url: str | None,
) -> CatalogSource:
    payload: TomlTable = {
        "directory": str(catalog_dir) if catalog_dir is not None else None,
        "base_url": catalog_url,
    }
    section = merge_payload(payload, catalog_defaults(root, config))
    return source_from_settings(CatalogSettings.from_config(section, root=root))


def _echo_diagnostics(diagnostics: tuple[str, ...] | list[str]) -> None:
    for message in diagnostics:
        typer.secho(f"warning: {message}", err=True, fg=typer.colors.YELLOW)


def _report_payload(result: ReportResult) -> ReportPayloadDTO:
    return ReportPayloadDTO(
        package=result.package,
        remote=result.remote,
        branch=result.branch,
        annotations=[
            AnnotationRecordDTO.from_record(record)
            for kind in TagKind.ordered()
            for record in result.records.get(kind, ())
        ],
        missing={category: list(ids) for category, ids in result.missing.items()},
        diagnostics=list(result.diagnostics),
        markdown=result.markdown(),
        file=str(result.file) if result.file is not None else None,
    )


def _write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


@app.command("report")
def report(
    ctx: typer.Context,
    path: Path = typer.Argument(Path("."), help="Package root directory."),
    branch: Optional[str] = typer.Option(
        None,
        "--branch",
        help="Branch used in source links (default: current git branch).",
    ),
    view: bool = typer.Option(
        True,
        "--view/--no-view",
        help="Open the rendered HTML report in the system viewer.",
    ),
    config: Optional[Path] = typer.Option(None, "--config"),
    source_dir: List[str] = typer.Option([], "--source-dir"),
    catalog_dir: Optional[Path] = typer.Option(
        None,
        "--catalog-dir",
        help="Read standards checklists from a local directory.",
    ),
    catalog_url: Optional[str] = typer.Option(None, "--catalog-url"),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        help="Write the markdown report here instead of stdout.",
    ),
    json_output: Optional[Path] = typer.Option(None, "--json"),
    strict: Optional[bool] = typer.Option(
        None,
        "--strict/--no-strict",
        help="Fail on annotations without a file location or identifiers.",
    ),
    fail_on_missing: bool = typer.Option(
        False,
        "--fail-on-missing/--no-fail-on-missing",
        help="Exit with code 1 when catalog standards are missing.",
    ),
) -> None:
    """Generate a standards compliance report for a package."""
    root = path.resolve()
    overrides = _context_report_overrides(ctx)
    try:
        if "catalog_source" not in overrides:
            overrides["catalog_source"] = _catalog_source(
                root, config, catalog_dir=catalog_dir, catalog_url=catalog_url
            )
        result = generate_report(
            root,
            branch=branch,
            view=view,
            settings=_report_settings(root, config, source_dir=source_dir, strict=strict),
            **overrides,
        )
    except ComplyscanError as exc:
        typer.secho(str(exc), err=True, fg=typer.colors.RED)
        raise typer.Exit(code=2) from exc

    _echo_diagnostics(result.diagnostics)
    if output is not None:
        _write_text(output, result.markdown())
        typer.echo(f"Wrote report markdown: {output}")
    else:
        typer.echo(result.markdown(), nl=False)
    if json_output is not None:
        payload = _report_payload(result).model_dump()
        _write_text(json_output, json.dumps(payload, indent=2, sort_keys=True) + "\n")
        typer.echo(f"Wrote report JSON: {json_output}", err=True)
    if result.file is not None:
        typer.echo(f"Rendered report: {result.file}", err=True)
    if fail_on_missing and result.missing:
        count = sum(len(ids) for ids in result.missing.values())
        typer.secho(f"{count} standard(s) missing.", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1)


@app.command("annotations")
def annotations(
    path: Path = typer.Argument(Path("."), help="Package root directory."),
    config: Optional[Path] = typer.Option(None, "--config"),
    source_dir: List[str] = typer.Option([], "--source-dir"),
    strict: Optional[bool] = typer.Option(None, "--strict/--no-strict"),
) -> None:
    """Print parsed annotations as JSON without consulting the catalog."""
    root = path.resolve()
    settings = _report_settings(root, config, source_dir=source_dir, strict=strict)
    try:
        collected = collect_records(root, settings)
    except ComplyscanError as exc:
        typer.secho(str(exc), err=True, fg=typer.colors.RED)
        raise typer.Exit(code=2) from exc
    _echo_diagnostics(collected.diagnostics)
    response = AnnotationsResponse(
        package=package_name(root),
        annotations=[AnnotationRecordDTO.from_record(record) for record in collected.all_records()],
        diagnostics=list(collected.diagnostics),
    )
    typer.echo(json.dumps(response.model_dump(), indent=2, sort_keys=True))
