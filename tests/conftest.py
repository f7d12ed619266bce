from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Mapping, Sequence

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT, ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))


import pytest

from tests.catalog_helpers import StubCatalogSource, checklist


@pytest.fixture
def general_and_regression_catalog() -> StubCatalogSource:
    return StubCatalogSource(
        {
            "general": checklist(
                ("G1.0", "List primary references."),
                ("G1.1", "Document novelty."),
                ("G1.1a", "Cite prior work."),
                ("G1.2", "Describe lifecycle."),
                ("G2.0", "Assert input length."),
            ),
            "regression": checklist(
                ("RE1.0", "Use formula interfaces."),
                ("RE1.1", "Document model matrices."),
                ("RE2.0", "Describe transformations."),
                ("RE3.0", "Report convergence."),
                ("RE3.1", "Allow convergence thresholds."),
            ),
        }
    )


@pytest.fixture
def make_package(tmp_path: Path) -> Callable[..., Path]:
    def _make(
        files: Mapping[str, str],
        *,
        package: str = "demo",
        name: str = "pkg",
    ) -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        (root / "DESCRIPTION").write_text(
            f"Package: {package}\nTitle: Demo package\nVersion: 0.1.0\n",
            encoding="utf-8",
        )
        for rel_path, text in files.items():
            target = root / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def fake_render(tmp_path: Path) -> Callable[..., Path]:
    calls: list[tuple[tuple[str, ...], str]] = []

    def _render(lines: Sequence[str], *, title: str = "") -> Path:
        calls.append((tuple(lines), title))
        return tmp_path / "report.html"

    _render.calls = calls  # type: ignore[attr-defined]
    return _render
