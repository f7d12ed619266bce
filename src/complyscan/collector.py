from __future__ import annotations

import re
from typing import Iterable

from complyscan.model import CommentBlock, RawAnnotation, TagKind, directory_label

_TAG_LINE_RE = re.compile(r"^@(?P<tag>\w+)(?:\s+(?P<content>.*))?$")


def collect_annotations(
    blocks: Iterable[CommentBlock],
    tag_kind: TagKind,
) -> list[RawAnnotation]:
    annotations: list[RawAnnotation] = []
    for block in blocks:
        for lineno, content in _tagged_lines(block, tag_kind.tag):
            annotations.append(
                RawAnnotation(
                    tag_kind=tag_kind,
                    text=format_message(
                        content,
                        path=block.path,
                        line=lineno,
                        function_name=block.function_name,
                    ),
                    directory=directory_label(block.path),
                )
            )
    return annotations


def collect_all(blocks: Iterable[CommentBlock]) -> dict[TagKind, list[RawAnnotation]]:
    materialized = list(blocks)
    return {kind: collect_annotations(materialized, kind) for kind in TagKind.ordered()}


def format_message(
    content: str,
    *,
    path: str,
    line: int | None,
    function_name: str | None,
) -> str:
    parts = [content] if content else []
    if function_name:
        parts.append(f"in function '{function_name}'")
    if line is not None:
        parts.append(f"on line#{line}")
    parts.append(f"of file [{path}]")
    return " ".join(parts)


def _tagged_lines(block: CommentBlock, tag: str) -> list[tuple[int, str]]:
    found: list[tuple[int, str]] = []
    active: list[str] | None = None
    active_line = 0
    for lineno, text in block.lines:
        match = _TAG_LINE_RE.match(text.strip())
        if match is not None:
            if active is not None:
                found.append((active_line, " ".join(active)))
            if match.group("tag") == tag:
                active = [(match.group("content") or "").strip()]
                active_line = lineno
            else:
                active = None
            continue
        if active is not None and text.strip():
            active.append(text.strip())
    if active is not None:
        found.append((active_line, " ".join(active)))
    return [(lineno, content.strip()) for lineno, content in found]
