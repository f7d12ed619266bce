from __future__ import annotations

import html
import tempfile
from pathlib import Path
from typing import Callable, Sequence

import markdown
import typer

_HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
{body}
</body>
</html>
"""


def markdown_to_html(lines: Sequence[str], *, title: str = "") -> str:
    # Every line is its own paragraph, matching how the report reads as text.
    body = markdown.markdown("\n\n".join(lines), extensions=["extra"])
    return _HTML_TEMPLATE.format(title=html.escape(title), body=body)


def write_html(
    lines: Sequence[str],
    *,
    title: str = "",
    output_dir: Path | None = None,
) -> Path:
    with tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        suffix=".html",
        prefix="complyscan-",
        dir=output_dir,
        delete=False,
    ) as handle:
        handle.write(markdown_to_html(lines, title=title))
    return Path(handle.name)


def view_html(path: Path, *, launch_fn: Callable[[str], object] = typer.launch) -> None:
    launch_fn(path.resolve().as_uri())
