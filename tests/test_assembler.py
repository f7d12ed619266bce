from __future__ import annotations

from complyscan.annotation_parser import parse_annotation
from complyscan.assembler import (
    RenderContext,
    assemble_report,
    record_header,
    render_record,
    tag_section,
    title_block,
)
from complyscan.catalog import parse_checklist
from complyscan.config import DEFAULT_REFERENCE_URL
from complyscan.model import AnnotationRecord, TagKind
from tests.catalog_helpers import checklist

CATALOG = parse_checklist(
    checklist(
        ("G1.0", "List references."),
        ("G1.1", "Document novelty."),
        ("G1.1a", "Cite prior work."),
        ("G2.3", "Match arguments."),
        ("RE1.0", "Use formulae."),
    )
)


def _record(
    *ids: str,
    kind: TagKind = TagKind.ADDRESSED,
    source_file: str | None = "R/a.R",
    function_name: str | None = None,
    line_number: int | None = None,
    directory: str = "R",
) -> AnnotationRecord:
    return AnnotationRecord(
        tag_kind=kind,
        standard_ids=ids,
        source_file=source_file,
        function_name=function_name,
        line_number=line_number,
        directory=directory,
    )


def test_scenario_renders_only_resolved_identifiers() -> None:
    record = parse_annotation(
        "Standards addressed: G1.1, G1.1a, EA2.0 in function 'foo' on line#42 of file [R/bar.R]",
        directory="R",
    )

    lines = render_record(record, CATALOG, RenderContext())

    assert lines == [
        "Standards in function 'foo' on line#42 of file R/bar.R:",
        "- G1.1 Document novelty.",
        "- G1.1a Cite prior work.",
    ]


def test_duplicate_identifiers_render_once_in_general_first_order() -> None:
    record = parse_annotation("X1.1, G2.3, RE1.0, RE1.0 of file [R/a.R]")

    bullets = render_record(record, CATALOG, RenderContext())[1:]

    assert bullets == ["- G2.3 Match arguments.", "- RE1.0 Use formulae."]


def test_header_links_to_remote_with_line_anchor() -> None:
    ctx = RenderContext(remote="https://github.com/org/pkg", branch="main")

    header = record_header(_record("G1.0", function_name="foo", line_number=42, source_file="R/bar.R"), ctx)

    assert header == (
        "Standards in function 'foo' on line#42 of file "
        "[R/bar.R](https://github.com/org/pkg/blob/main/R/bar.R#L42):"
    )


def test_header_variants_without_function_or_line() -> None:
    ctx = RenderContext()

    assert record_header(_record("G1.0"), ctx) == "Standards in file R/a.R:"
    assert record_header(_record("G1.0", line_number=3), ctx) == "Standards on line#3 of file R/a.R:"
    assert (
        record_header(_record("G1.0", source_file=None, line_number=3), ctx)
        == "Standards on line#3 of file <unknown file>:"
    )


def test_remote_link_without_line_and_blame_view() -> None:
    ctx = RenderContext(remote="https://github.com/org/pkg", branch="dev", remote_view="blame")

    assert ctx.file_url("R/a.R", None) == "https://github.com/org/pkg/blame/dev/R/a.R"


def test_tag_section_groups_by_first_seen_directory() -> None:
    records = [
        _record("G1.0", source_file="R/a.R"),
        _record("G1.1", source_file="zzz.R", directory="root"),
        _record("RE1.0", source_file="R/b.R"),
    ]

    lines = tag_section(TagKind.ADDRESSED, records, CATALOG, RenderContext())

    assert lines == [
        "## Standards with `srrstats` tag",
        "",
        "",
        "### R directory",
        "",
        "Standards in file R/a.R:",
        "- G1.0 List references.",
        "Standards in file R/b.R:",
        "- RE1.0 Use formulae.",
        "",
        "### root directory",
        "",
        "Standards in file zzz.R:",
        "- G1.1 Document novelty.",
        "",
        "---",
        "",
    ]


def test_empty_tag_section_is_omitted() -> None:
    assert tag_section(TagKind.PENDING, [], CATALOG, RenderContext()) == []


def test_title_block_with_and_without_remote() -> None:
    assert title_block("demo", remote=None) == [
        "# srr report for demo",
        "",
        f"[Click here for full text of all standards]({DEFAULT_REFERENCE_URL})",
        "",
    ]
    linked = title_block("demo", remote="https://github.com/org/demo", title="Audit")
    assert linked[0] == "# Audit for [demo](https://github.com/org/demo)"


def test_assemble_report_omits_empty_kinds_and_reports_missing() -> None:
    records = {
        TagKind.ADDRESSED: [_record("G1.0", "G1.1", "EA2.0")],
        TagKind.NOT_APPLICABLE: [],
        TagKind.PENDING: [_record("RE1.0", kind=TagKind.PENDING)],
    }

    assembled = assemble_report(records, CATALOG, package="demo", ctx=RenderContext())

    text = assembled.text()
    assert "`srrstats` tag" in text
    assert "`srrstatsNA` tag" not in text
    assert "`srrstatsTODO` tag" in text
    assert assembled.missing == {"general": ["G1.1a", "G2.3"]}
    assert assembled.lines[-2] == "G1.1a, G2.3"


def test_assemble_report_without_records_is_title_only() -> None:
    assembled = assemble_report({}, parse_checklist([]), package="demo", ctx=RenderContext())

    assert list(assembled.lines) == title_block("demo", remote=None)
