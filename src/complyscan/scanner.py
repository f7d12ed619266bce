"""Locate documentation comment blocks in a package's source files.

Two block flavours are recognised:

* roxygen-style runs of ``#'`` comment lines, in any eligible file;
* Python docstrings (module, class and function), found with libcst so that
  each docstring line keeps its real line number.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

import libcst as cst
from libcst.metadata import MetadataWrapper, PositionProvider

from complyscan.config import DEFAULT_SOURCE_DIRS, DEFAULT_SUFFIXES
from complyscan.model import CommentBlock

_ROXYGEN_RE = re.compile(r"^\s*#'\s?(?P<text>.*)$")
_R_FUNCTION_RE = re.compile(
    r"^\s*(?P<name>`[^`]+`|[A-Za-z.][\w.]*)\s*(?:<-|<<-|=)\s*function\b"
)
_PY_DEF_RE = re.compile(r"^\s*(?:async\s+)?(?:def|class)\s+(?P<name>\w+)")


@dataclass(frozen=True)
class ScanResult:
    blocks: tuple[CommentBlock, ...] = ()
    diagnostics: tuple[str, ...] = ()


def scan_comment_blocks(
    root: Path,
    *,
    source_dirs: Sequence[str] = DEFAULT_SOURCE_DIRS,
    suffixes: Sequence[str] = DEFAULT_SUFFIXES,
) -> ScanResult:
    root = root.resolve()
    diagnostics: list[str] = []
    blocks: list[CommentBlock] = []
    files = _collect_source_files(root, source_dirs, suffixes, diagnostics)
    if not files:
        dirs = ", ".join(source_dirs)
        diagnostics.append(f"no eligible source files found in: {dirs}")
    for path in files:
        rel_path = path.relative_to(root).as_posix()
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            diagnostics.append(f"unable to read {rel_path}: {exc}")
            continue
        blocks.extend(_file_blocks(text, rel_path, diagnostics))
    return ScanResult(blocks=tuple(blocks), diagnostics=tuple(diagnostics))


def _collect_source_files(
    root: Path,
    source_dirs: Iterable[str],
    suffixes: Sequence[str],
    diagnostics: list[str],
) -> list[Path]:
    suffix_set = set(suffixes)
    seen: set[Path] = set()
    files: list[Path] = []
    for source_dir in source_dirs:
        if source_dir in {".", ""}:
            candidates = sorted(path for path in root.iterdir() if path.is_file())
        else:
            base = root / source_dir
            if not base.is_dir():
                diagnostics.append(f"source directory not found: {source_dir}")
                continue
            candidates = sorted(path for path in base.rglob("*") if path.is_file())
        for candidate in candidates:
            if candidate.suffix not in suffix_set or candidate in seen:
                continue
            seen.add(candidate)
            files.append(candidate)
    return files


def _file_blocks(text: str, rel_path: str, diagnostics: list[str]) -> list[CommentBlock]:
    entries = _roxygen_blocks(text.splitlines(), rel_path)
    if rel_path.endswith(".py"):
        try:
            entries.extend(_docstring_blocks(text, rel_path))
        except cst.ParserSyntaxError as exc:
            diagnostics.append(f"unable to parse {rel_path}: {exc.message}")
        entries.sort(key=lambda block: block.line)
    return entries


def _roxygen_blocks(lines: list[str], rel_path: str) -> list[CommentBlock]:
    blocks: list[CommentBlock] = []
    current: list[tuple[int, str]] = []
    for lineno, line in enumerate(lines, start=1):
        match = _ROXYGEN_RE.match(line)
        if match:
            current.append((lineno, match.group("text").rstrip()))
            continue
        if current:
            blocks.append(_close_roxygen_block(current, lines, rel_path))
            current = []
    if current:
        blocks.append(_close_roxygen_block(current, lines, rel_path))
    return blocks


def _close_roxygen_block(
    current: list[tuple[int, str]], lines: list[str], rel_path: str
) -> CommentBlock:
    last_line = current[-1][0]
    return CommentBlock(
        path=rel_path,
        line=current[0][0],
        lines=tuple(current),
        function_name=_documented_object(lines, last_line),
    )


def _documented_object(lines: list[str], after_line: int) -> str | None:
    for line in lines[after_line:]:
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or stripped.startswith("@"):
            continue
        match = _R_FUNCTION_RE.match(line) or _PY_DEF_RE.match(line)
        if match is None:
            return None
        return match.group("name").strip("`")
    return None


def _docstring_blocks(text: str, rel_path: str) -> list[CommentBlock]:
    wrapper = MetadataWrapper(cst.parse_module(text))
    visitor = _DocstringCollector(rel_path)
    wrapper.visit(visitor)
    return visitor.blocks


def _leading_string(body: Sequence[cst.BaseStatement]) -> cst.SimpleString | None:
    if not body:
        return None
    first = body[0]
    if not isinstance(first, cst.SimpleStatementLine) or not first.body:
        return None
    expr = first.body[0]
    if isinstance(expr, cst.Expr) and isinstance(expr.value, cst.SimpleString):
        return expr.value
    return None


class _DocstringCollector(cst.CSTVisitor):
    METADATA_DEPENDENCIES = (PositionProvider,)

    def __init__(self, rel_path: str) -> None:
        super().__init__()
        self._rel_path = rel_path
        self._scope: list[str] = []
        self.blocks: list[CommentBlock] = []

    def visit_Module(self, node: cst.Module) -> None:  # noqa: N802
        self._record(_leading_string(node.body), None)

    def visit_ClassDef(self, node: cst.ClassDef) -> None:  # noqa: N802
        self._scope.append(node.name.value)
        self._record(self._body_string(node.body), ".".join(self._scope))

    def leave_ClassDef(self, original_node: cst.ClassDef) -> None:  # noqa: N802
        self._scope.pop()

    def visit_FunctionDef(self, node: cst.FunctionDef) -> None:  # noqa: N802
        self._scope.append(node.name.value)
        self._record(self._body_string(node.body), ".".join(self._scope))

    def leave_FunctionDef(self, original_node: cst.FunctionDef) -> None:  # noqa: N802
        self._scope.pop()

    @staticmethod
    def _body_string(body: cst.BaseSuite) -> cst.SimpleString | None:
        if isinstance(body, cst.IndentedBlock):
            return _leading_string(body.body)
        return None

    def _record(self, node: cst.SimpleString | None, owner: str | None) -> None:
        if node is None:
            return
        value = node.evaluated_value
        if not isinstance(value, str):
            return
        start = self.get_metadata(PositionProvider, node).start.line
        numbered = tuple(
            (start + offset, line.strip())
            for offset, line in enumerate(value.splitlines())
        )
        if not numbered:
            return
        self.blocks.append(
            CommentBlock(
                path=self._rel_path,
                line=start,
                lines=numbered,
                function_name=owner,
            )
        )
