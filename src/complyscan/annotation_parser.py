"""Parse annotation messages into :class:`AnnotationRecord` values.

Annotation messages follow a small grammar::

    annotation   := item* location?
    item         := STANDARD_ID | LINE_REF | FUNCTION_REF | WORD | OTHER
    location     := "file" "[" path "]" <end of text>

    STANDARD_ID  := [A-Z]+[0-9]+ "." [0-9][0-9]?[a-z]?
    LINE_REF     := "line#" [0-9]+
    FUNCTION_REF := "function" "'" [^']* "'"

The location is split off first with an end-anchored match, so brackets and
apostrophes elsewhere in the message are ordinary text. A message such as
``Standards addressed: G1.1, EA2.0 in function 'foo' on line#42 of file
[R/bar.R]`` yields identifiers ``G1.1`` and ``EA2.0``, function ``foo``,
line ``42`` and file ``R/bar.R``. Identifiers are collected anywhere outside
the location and the function name. Only the first ``line#`` and the first
function reference are used.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from complyscan.exceptions import AnnotationSyntaxError
from complyscan.model import (
    ROOT_DIRECTORY,
    STANDARD_ID_PATTERN,
    AnnotationRecord,
    RawAnnotation,
    TagKind,
    order_standard_ids,
)

_LOCATION_RE = re.compile(r"\bfile\s+\[(?P<path>[^\[\]]*)\]\s*$")
_TOKEN_RE = re.compile(
    r"(?P<FUNCTION_REF>\bfunction\s+'[^']*')"
    r"|(?P<LINE_REF>line#[0-9]+)"
    rf"|(?P<STANDARD_ID>{STANDARD_ID_PATTERN})"
    r"|(?P<WORD>[A-Za-z_][\w-]*)"
    r"|(?P<SPACE>\s+)"
    r"|(?P<OTHER>.)",
    re.DOTALL,
)


@dataclass(frozen=True)
class Token:
    kind: str
    value: str


def tokenize(text: str) -> list[Token]:
    tokens: list[Token] = []
    for match in _TOKEN_RE.finditer(text):
        kind = match.lastgroup or "OTHER"
        if kind == "SPACE":
            continue
        tokens.append(Token(kind, match.group(kind)))
    return tokens


def split_location(text: str) -> tuple[str, str | None]:
    """Split ``text`` into its body and the trailing ``file [path]`` location."""
    match = _LOCATION_RE.search(text)
    if match is None:
        return text, None
    return text[: match.start()], match.group("path").strip() or None


class _AnnotationParser:
    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._pos = 0
        self.standard_ids: list[str] = []
        self.line_number: int | None = None
        self.function_name: str | None = None

    def parse(self) -> None:
        while self._pos < len(self._tokens):
            self._item()

    def _item(self) -> None:
        token = self._tokens[self._pos]
        self._pos += 1
        if token.kind == "STANDARD_ID":
            self.standard_ids.append(token.value)
        elif token.kind == "LINE_REF":
            if self.line_number is None:
                self.line_number = int(token.value[len("line#"):])
        elif token.kind == "FUNCTION_REF":
            if self.function_name is None:
                self.function_name = token.value.split("'", 1)[1][:-1]


def parse_annotation(
    text: str,
    *,
    tag_kind: TagKind = TagKind.ADDRESSED,
    directory: str = ROOT_DIRECTORY,
    strict: bool = False,
) -> AnnotationRecord:
    body, source_file = split_location(text.strip())
    parser = _AnnotationParser(tokenize(body))
    parser.parse()
    if strict:
        if source_file is None:
            raise AnnotationSyntaxError("annotation has no 'file [path]' location", text=text)
        if not parser.standard_ids:
            raise AnnotationSyntaxError("annotation names no standard identifiers", text=text)
    return AnnotationRecord(
        tag_kind=tag_kind,
        standard_ids=order_standard_ids(parser.standard_ids),
        source_file=source_file,
        function_name=parser.function_name,
        line_number=parser.line_number,
        directory=directory,
    )


def parse_annotations(
    annotations: Iterable[RawAnnotation],
    *,
    strict: bool = False,
) -> list[AnnotationRecord]:
    return [
        parse_annotation(
            item.text,
            tag_kind=item.tag_kind,
            directory=item.directory,
            strict=strict,
        )
        for item in annotations
    ]
