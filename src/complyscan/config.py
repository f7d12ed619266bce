from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

DEFAULT_CONFIG_NAME = "complyscan.toml"

DEFAULT_SOURCE_DIRS: tuple[str, ...] = ("R",)
DEFAULT_SUFFIXES: tuple[str, ...] = (".R", ".r", ".py")
DEFAULT_TITLE = "srr report"
DEFAULT_REFERENCE_URL = (
    "https://ropenscilabs.github.io/statistical-software-review-book/standards.html"
)
DEFAULT_CATALOG_URL = (
    "https://raw.githubusercontent.com/ropensci/statistical-software-review-book/main/standards"
)
DEFAULT_CATALOG_TIMEOUT = 20.0
REMOTE_VIEWS = ("blob", "blame")

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def report_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("report", {})
    return section if isinstance(section, dict) else {}


def catalog_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("catalog", {})
    return section if isinstance(section, dict) else {}


def _normalize_name_list(value: TomlValue) -> list[str]:
    items: list[str] = []
    if value is None:
        return items
    if isinstance(value, str):
        items = [part.strip() for part in value.split(",") if part.strip()]
    elif isinstance(value, (list, tuple, set)):
        for item in value:
            if isinstance(item, str):
                items.extend([part.strip() for part in item.split(",") if part.strip()])
    return [item for item in items if item]


def _as_bool(value: TomlValue) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return False


def _as_str(value: TomlValue, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _as_float(value: TomlValue, default: float) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)) and value > 0:
        return float(value)
    return default


def merge_payload(payload: TomlTable, defaults: TomlTable) -> TomlTable:
    merged = dict(defaults)
    for key, value in payload.items():
        if value is None:
            continue
        merged[key] = value
    return merged


@dataclass(frozen=True)
class ReportSettings:
    source_dirs: tuple[str, ...] = DEFAULT_SOURCE_DIRS
    suffixes: tuple[str, ...] = DEFAULT_SUFFIXES
    title: str = DEFAULT_TITLE
    reference_url: str = DEFAULT_REFERENCE_URL
    # "blame" links are available with remote_view = "blame" under [report].
    remote_view: str = "blob"
    strict_annotations: bool = False

    @classmethod
    def from_config(cls, section: TomlTable | None) -> "ReportSettings":
        if not isinstance(section, dict):
            return cls()
        source_dirs = _normalize_name_list(section.get("source_dirs"))
        suffixes = _normalize_name_list(section.get("suffixes"))
        remote_view = _as_str(section.get("remote_view"), "blob")
        if remote_view not in REMOTE_VIEWS:
            remote_view = "blob"
        return cls(
            source_dirs=tuple(source_dirs) or DEFAULT_SOURCE_DIRS,
            suffixes=tuple(suffixes) or DEFAULT_SUFFIXES,
            title=_as_str(section.get("title"), DEFAULT_TITLE),
            reference_url=_as_str(section.get("reference_url"), DEFAULT_REFERENCE_URL),
            remote_view=remote_view,
            strict_annotations=_as_bool(section.get("strict_annotations")),
        )


@dataclass(frozen=True)
class CatalogSettings:
    base_url: str = DEFAULT_CATALOG_URL
    directory: Path | None = None
    timeout: float = DEFAULT_CATALOG_TIMEOUT

    @classmethod
    def from_config(
        cls, section: TomlTable | None, *, root: Path | None = None
    ) -> "CatalogSettings":
        if not isinstance(section, dict):
            return cls()
        directory: Path | None = None
        raw_directory = section.get("directory")
        if isinstance(raw_directory, str) and raw_directory.strip():
            directory = Path(raw_directory.strip())
            if root is not None and not directory.is_absolute():
                directory = root / directory
        return cls(
            base_url=_as_str(section.get("base_url"), DEFAULT_CATALOG_URL),
            directory=directory,
            timeout=_as_float(section.get("timeout"), DEFAULT_CATALOG_TIMEOUT),
        )
