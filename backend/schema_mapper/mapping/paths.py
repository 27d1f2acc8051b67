"""Structural path locators such as ``item.statements[0].qualifiers[1].value``."""

from __future__ import annotations

import re
from dataclasses import dataclass

from schema_mapper.mapping.types import TargetKind

_SEGMENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_-]*")
_INDEX_RE = re.compile(r"\[(0|[1-9][0-9]*)\]")
_TERM_LANGUAGE_RE = re.compile(r"\.(labels|descriptions|aliases)\.([a-z]{2,3}(?:-[a-z0-9]+)*)")


class InvalidPathError(ValueError):
    """Raised when a path does not follow the segment/index grammar."""


@dataclass(frozen=True, slots=True)
class PathSegment:
    name: str
    index: int | None = None


def parse_path(path: str) -> tuple[PathSegment, ...]:
    """Split a path into named segments with optional array indices."""

    if not path:
        raise InvalidPathError("path must be non-empty")
    segments: list[PathSegment] = []
    position = 0
    while position < len(path):
        if segments:
            if path[position] != ".":
                raise InvalidPathError(f"expected '.' at position {position} in '{path}'")
            position += 1
        match = _SEGMENT_RE.match(path, position)
        if match is None:
            raise InvalidPathError(f"invalid segment at position {position} in '{path}'")
        name = match.group(0)
        position = match.end()
        index_match = _INDEX_RE.match(path, position)
        if index_match is not None:
            segments.append(PathSegment(name=name, index=int(index_match.group(1))))
            position = index_match.end()
        else:
            segments.append(PathSegment(name=name))
    return tuple(segments)


def is_valid_path(path: str) -> bool:
    try:
        parse_path(path)
    except InvalidPathError:
        return False
    return True


def ensure_path(path: str) -> str:
    """Return ``path`` unchanged after checking it against the grammar."""

    parse_path(path)
    return path


def is_under(path: str, prefix: str) -> bool:
    """Structural prefix test; ``item.statements[1]`` is not under ``item.statements[10]``."""

    if path == prefix:
        return True
    return path.startswith(prefix) and path[len(prefix)] in ".["


def target_kind_from_path(path: str) -> TargetKind:
    """Infer the target kind of a path, defaulting to ``statement``."""

    names = {segment.name for segment in parse_path(path)}
    if "labels" in names:
        return "label"
    if "descriptions" in names:
        return "description"
    if "aliases" in names:
        return "alias"
    if "qualifiers" in names:
        return "qualifier"
    if "references" in names:
        return "reference"
    return "statement"


def language_from_path(path: str) -> str | None:
    match = _TERM_LANGUAGE_RE.search(path)
    return match.group(2) if match else None


def statement_path(index: int, *parts: str) -> str:
    """Build ``item.statements[index]`` optionally followed by dotted parts."""

    base = f"item.statements[{index}]"
    return ".".join((base, *parts)) if parts else base


def term_path(kind: TargetKind, language_code: str) -> str:
    section = {"label": "labels", "description": "descriptions", "alias": "aliases"}[kind]
    return f"item.terms.{section}.{language_code}"
