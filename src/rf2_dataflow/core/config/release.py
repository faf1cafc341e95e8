"""
Materialização tipada da seção `release` da configuração.

Exemplo:

    engine:
      workers: 4
    validation:
      allow_empty_effective_time: true
      chunk_size: 1000
    release:
      date: "20240131"
      output_dir: out
      sources:
        Concept: [a/sct2_Concept_Full.txt, b/sct2_Concept_Full.txt]
      files:
        - name: sct2_Concept_Snapshot_INT_20240131.txt
          content_type: Concept
          release_type: Snapshot
      check:
        files:
          - path: out/sct2_Concept_Snapshot_INT_20240131.txt
            content_type: Concept
        report_path: out/issues.md

Regras:
    - `release.date` tem 8 dígitos e é uma data real; obrigatória quando há
      arquivos a montar
    - todo arquivo declara content type e release type conhecidos
    - nomes de saída são únicos
Violações levantam InvalidReleaseConfigError (ou UnknownContentTypeError).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from rf2_dataflow.core.exceptions import InvalidReleaseConfigError, UnknownContentTypeError
from rf2_dataflow.model.content_file import CONTENT_FILE_TYPES
from rf2_dataflow.model.release import ReleaseType


DEFAULT_WORKERS = 4
DEFAULT_CHUNK_SIZE = 1000


@dataclass(frozen=True)
class OutputFileSpec:
    name: str
    content_type: str
    release_type: ReleaseType


@dataclass(frozen=True)
class CheckTarget:
    path: Path
    content_type: str
    release_type: Optional[ReleaseType] = None


@dataclass(frozen=True)
class ReleaseSettings:
    """Visão tipada e validada de `release`, `engine.workers` e `validation`."""

    date: Optional[str]
    output_dir: Path
    sources: Dict[str, Tuple[Path, ...]] = field(default_factory=dict)
    files: Tuple[OutputFileSpec, ...] = ()
    check_targets: Tuple[CheckTarget, ...] = ()
    report_path: Optional[Path] = None
    workers: int = DEFAULT_WORKERS
    chunk_size: int = DEFAULT_CHUNK_SIZE
    allow_empty_effective_time: bool = True

    def output_path(self, spec: OutputFileSpec) -> Path:
        return self.output_dir / spec.name


def _invalid(message: str, **details: Any) -> InvalidReleaseConfigError:
    return InvalidReleaseConfigError(
        message=message,
        details=details,
        hint="Revise a seção `release` da configuração.",
    )


def _section(config: Mapping[str, Any], key: str) -> Dict[str, Any]:
    value = config.get(key) or {}
    if not isinstance(value, Mapping):
        raise _invalid(f"`{key}` must be a mapping", key=key, received=type(value).__name__)
    return dict(value)


def _content_type(value: Any, where: str) -> str:
    content_type = str(value or "")
    if content_type not in CONTENT_FILE_TYPES:
        raise UnknownContentTypeError(
            message=f"unknown content type: {content_type!r}",
            details={"where": where, "content_type": content_type, "known": sorted(CONTENT_FILE_TYPES)},
            hint="Use um dos content types conhecidos.",
        )
    return content_type


def _positive_int(value: Any, key: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise _invalid(f"`{key}` must be an integer", key=key, received=value) from None
    if number < 1:
        raise _invalid(f"`{key}` must be >= 1", key=key, received=number)
    return number


def _bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise _invalid(f"`{key}` must be a boolean (true/false)", key=key, received=value)
    return value


def _release_date(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    date = str(value)
    if len(date) != 8 or not date.isdigit():
        raise _invalid("`release.date` must be in YYYYMMDD format", received=date)
    try:
        datetime.strptime(date, "%Y%m%d")
    except ValueError:
        raise _invalid("`release.date` is not a valid calendar date", received=date) from None
    return date


def _sources(raw: Any) -> Dict[str, Tuple[Path, ...]]:
    if not isinstance(raw, Mapping):
        raise _invalid("`release.sources` must map content type to paths", received=type(raw).__name__)
    sources: Dict[str, Tuple[Path, ...]] = {}
    for key, paths in raw.items():
        content_type = _content_type(key, "release.sources")
        if isinstance(paths, (str, Path)):
            paths = [paths]
        if not isinstance(paths, list):
            raise _invalid("source paths must be a list", content_type=content_type)
        sources[content_type] = tuple(Path(str(p)) for p in paths)
    return sources


def _output_files(raw: Any) -> Tuple[OutputFileSpec, ...]:
    if not isinstance(raw, list):
        raise _invalid("`release.files` must be a list", received=type(raw).__name__)

    specs: List[OutputFileSpec] = []
    seen = set()
    for index, item in enumerate(raw):
        where = f"release.files[{index}]"
        if not isinstance(item, Mapping):
            raise _invalid(f"`{where}` must be a mapping")
        name = str(item.get("name") or "").strip()
        if not name:
            raise _invalid(f"`{where}.name` is required")
        if name in seen:
            raise _invalid("duplicate output file name", name=name)
        seen.add(name)
        specs.append(
            OutputFileSpec(
                name=name,
                content_type=_content_type(item.get("content_type"), where),
                release_type=ReleaseType.parse(item.get("release_type")),
            )
        )
    return tuple(specs)


def _check_targets(raw: Any) -> Tuple[CheckTarget, ...]:
    if not isinstance(raw, list):
        raise _invalid("`release.check.files` must be a list", received=type(raw).__name__)

    targets: List[CheckTarget] = []
    for index, item in enumerate(raw):
        where = f"release.check.files[{index}]"
        if not isinstance(item, Mapping) or not item.get("path"):
            raise _invalid(f"`{where}` must declare a path")
        release_type = item.get("release_type")
        targets.append(
            CheckTarget(
                path=Path(str(item["path"])),
                content_type=_content_type(item.get("content_type"), where),
                release_type=None if release_type is None else ReleaseType.parse(release_type),
            )
        )
    return tuple(targets)


def load_release_settings(config: Mapping[str, Any]) -> ReleaseSettings:
    """Lê e valida a configuração resolvida (ver exemplo no docstring do módulo)."""
    release = _section(config, "release")
    engine = _section(config, "engine")
    validation = _section(config, "validation")
    check = release.get("check") or {}
    if not isinstance(check, Mapping):
        raise _invalid("`release.check` must be a mapping", received=type(check).__name__)

    files = _output_files(release.get("files") or [])
    date = _release_date(release.get("date"))
    if files and date is None:
        raise _invalid("`release.date` is required when `release.files` is declared")

    report_path = check.get("report_path")

    return ReleaseSettings(
        date=date,
        output_dir=Path(str(release.get("output_dir") or ".")),
        sources=_sources(release.get("sources") or {}),
        files=files,
        check_targets=_check_targets(check.get("files") or []),
        report_path=None if not report_path else Path(str(report_path)),
        workers=_positive_int(engine.get("workers", DEFAULT_WORKERS), "engine.workers"),
        chunk_size=_positive_int(validation.get("chunk_size", DEFAULT_CHUNK_SIZE), "validation.chunk_size"),
        allow_empty_effective_time=_bool(
            validation.get("allow_empty_effective_time", True), "validation.allow_empty_effective_time"
        ),
    )
