from __future__ import annotations

import pytest

from complyscan.annotation_parser import parse_annotation, parse_annotations, tokenize
from complyscan.collector import collect_annotations
from complyscan.exceptions import AnnotationSyntaxError
from complyscan.model import CommentBlock, RawAnnotation, TagKind


def test_full_annotation_message() -> None:
    record = parse_annotation(
        "Standards addressed: G1.1, G1.1a, EA2.0 in function 'foo' on line#42 of file [R/bar.R]",
        directory="R",
    )

    assert record.standard_ids == ("G1.1", "G1.1a", "EA2.0")
    assert record.function_name == "foo"
    assert record.line_number == 42
    assert record.source_file == "R/bar.R"
    assert record.directory == "R"
    assert record.tag_kind is TagKind.ADDRESSED


def test_identifiers_are_deduplicated_with_general_first() -> None:
    record = parse_annotation("X1.1, X1.1, G2.3 of file [R/a.R]")

    assert record.standard_ids == ("G2.3", "X1.1")


def test_only_first_line_reference_is_used() -> None:
    record = parse_annotation("G1.0 on line#5 and line#9 of file [R/a.R]")

    assert record.line_number == 5


def test_absent_fields_are_none() -> None:
    record = parse_annotation("{G1.0} nothing else")

    assert record.line_number is None
    assert record.function_name is None
    assert record.source_file is None


def test_function_requires_quoted_name() -> None:
    record = parse_annotation("G1.0 in function foo of file [R/a.R]")

    assert record.function_name is None
    assert record.source_file == "R/a.R"


def test_file_location_must_end_the_text() -> None:
    record = parse_annotation("G1.0 of file [R/a.R] trailing words")

    assert record.source_file is None


def test_function_name_and_file_path_are_not_identifiers() -> None:
    record = parse_annotation("{RE1.0} in function 'G1.0' of file [R/G2.0.R]")

    assert record.standard_ids == ("RE1.0",)
    assert record.function_name == "G1.0"
    assert record.source_file == "R/G2.0.R"


def test_apostrophes_inside_words_are_not_quotes() -> None:
    record = parse_annotation("G1.0 don't fail in function 'bar' of file [R/a.R]")

    assert record.function_name == "bar"


def test_identifiers_inside_brackets_are_collected() -> None:
    record = parse_annotation("{G1.0} see also [G2.0] of file [R/a.R]")

    assert record.standard_ids == ("G1.0", "G2.0")
    assert record.source_file == "R/a.R"


def test_unclosed_apostrophe_keeps_function_and_identifiers() -> None:
    record = parse_annotation(
        "{G1.0} Handles 'NA values, G2.13 too in function 'fit' on line#3 of file [R/a.R]"
    )

    assert record.standard_ids == ("G1.0", "G2.13")
    assert record.function_name == "fit"
    assert record.line_number == 3


def test_open_interval_in_content_keeps_location() -> None:
    block = CommentBlock(
        path="R/fit.R",
        line=3,
        lines=((3, "@srrstats {G2.4} Accepts values in [0, 1) only."),),
        function_name="fit",
    )
    (raw,) = collect_annotations([block], TagKind.ADDRESSED)

    record = parse_annotation(raw.text, directory=raw.directory, strict=True)

    assert record.source_file == "R/fit.R"
    assert record.function_name == "fit"
    assert record.line_number == 3
    assert record.standard_ids == ("G2.4",)


def test_location_path_cannot_span_brackets() -> None:
    record = parse_annotation("G1.0 within file [0, 1) of file [R/a.R]")

    assert record.source_file == "R/a.R"


def test_tokenize_classifies_structured_tokens() -> None:
    kinds = [token.kind for token in tokenize("G1.2a line#3 function 'fn' word ,")]

    assert kinds == ["STANDARD_ID", "LINE_REF", "FUNCTION_REF", "WORD", "OTHER"]


def test_strict_mode_rejects_missing_file() -> None:
    with pytest.raises(AnnotationSyntaxError) as excinfo:
        parse_annotation("G1.0 on line#2", strict=True)
    assert excinfo.value.text == "G1.0 on line#2"


def test_strict_mode_rejects_missing_identifiers() -> None:
    with pytest.raises(AnnotationSyntaxError):
        parse_annotation("nothing here of file [R/a.R]", strict=True)


def test_parse_annotations_keeps_kind_and_directory() -> None:
    raw = [
        RawAnnotation(TagKind.NOT_APPLICABLE, "{RE3.1} of file [R/a.R]", "R"),
        RawAnnotation(TagKind.PENDING, "{G5.0} of file [zzz.R]", "root"),
    ]

    records = parse_annotations(raw)

    assert [(item.tag_kind, item.directory) for item in records] == [
        (TagKind.NOT_APPLICABLE, "R"),
        (TagKind.PENDING, "root"),
    ]
