from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from complyscan.invariants import never


@dataclass
class ReportDoc:
    _lines: list[str] = field(default_factory=list)

    def lines(self, items: Iterable[str]) -> None:
        self._lines.extend(items)

    def line(self, value: str = "") -> None:
        self._lines.append(value)

    def header(self, level: int, title: str) -> None:
        if level < 1 or level > 6:
            never(
                "report header level out of range",
                level=level,
            )
        self._lines.append(f"{'#' * level} {title}")

    def bullets(self, items: Iterable[str]) -> None:
        for item in items:
            self._lines.append(f"- {item}")

    @staticmethod
    def link(label: str, url: str | None) -> str:
        if not url:
            return label
        return f"[{label}]({url})"

    def rule(self) -> None:
        self._lines.append("---")

    def emit(self) -> list[str]:
        return list(self._lines)

    def text(self) -> str:
        return "\n".join(self._lines) + "\n"
