from __future__ import annotations

from pathlib import Path
import tomllib

DESCRIPTION_FILE = "DESCRIPTION"
PYPROJECT_FILE = "pyproject.toml"


def parse_dcf(text: str) -> dict[str, str]:
    """Parse Debian-control-style ``Key: value`` records.

    Indented lines continue the previous field. Only the first record is
    read; a blank line ends it.
    """
    fields: dict[str, str] = {}
    key: str | None = None
    for raw in text.splitlines():
        if not raw.strip():
            if fields:
                break
            continue
        if raw[0] in " \t":
            if key is not None:
                fields[key] = f"{fields[key]} {raw.strip()}".strip()
            continue
        name, sep, value = raw.partition(":")
        if not sep:
            continue
        key = name.strip()
        fields[key] = value.strip()
    return fields


def read_description(root: Path) -> dict[str, str]:
    try:
        text = (root / DESCRIPTION_FILE).read_text(encoding="utf-8")
    except OSError:
        return {}
    return parse_dcf(text)


def _pyproject_name(root: Path) -> str | None:
    try:
        data = tomllib.loads((root / PYPROJECT_FILE).read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        return None
    project = data.get("project")
    if isinstance(project, dict):
        name = project.get("name")
        if isinstance(name, str) and name.strip():
            return name.strip()
    return None


def package_name(root: Path) -> str:
    name = read_description(root).get("Package", "").strip()
    if name:
        return name
    return _pyproject_name(root) or root.resolve().name
