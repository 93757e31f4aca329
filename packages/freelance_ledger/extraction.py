"""Project/client name extraction from export descriptions.

A short chain of extractors is tried in order until one yields a project
name. Only the first extractor (``"from <Client> for project <Project>"``)
can produce a client name.
"""

from __future__ import annotations

import html
import re
from collections.abc import Callable, Sequence
from typing import NamedTuple


class EntityMatch(NamedTuple):
    project_name: str | None
    client_name: str | None


type Extractor = Callable[[str], EntityMatch | None]

# Project names run to the end of the text or to a " (" suffix such as a
# reference number: "for project Website Redesign (ref 123)".
_PROJECT_TAIL = r"(?P<project>.+?)(?:\s+\(|$)"

_FROM_CLIENT_FOR_PROJECT_RE = re.compile(
    r"from\s+(?P<client>.+?)\s+for\s+project\s+" + _PROJECT_TAIL, re.IGNORECASE
)
_FEE_TAKEN_RE = re.compile(r"fee\s+taken\s+\((?P<project>[^)]+)\)", re.IGNORECASE)
_FOR_PROJECT_RE = re.compile(r"for\s+project\s+" + _PROJECT_TAIL, re.IGNORECASE)
_PAREN_SUFFIX_RE = re.compile(r"\s*\(.*$")


def _clean(segment: str | None) -> str | None:
    if segment is None:
        return None
    s = html.unescape(segment).strip()
    return s or None


def from_client_for_project(description: str) -> EntityMatch | None:
    m = _FROM_CLIENT_FOR_PROJECT_RE.search(description)
    if not m:
        return None
    project = _clean(m.group("project"))
    if project is None:
        return None
    client = _clean(_PAREN_SUFFIX_RE.sub("", m.group("client")))
    return EntityMatch(project, client)


def fee_taken_project(description: str) -> EntityMatch | None:
    m = _FEE_TAKEN_RE.search(description)
    if not m:
        return None
    project = _clean(m.group("project"))
    return EntityMatch(project, None) if project else None


def for_project(description: str) -> EntityMatch | None:
    m = _FOR_PROJECT_RE.search(description)
    if not m:
        return None
    project = _clean(m.group("project"))
    return EntityMatch(project, None) if project else None


EXTRACTORS: tuple[Extractor, ...] = (
    from_client_for_project,
    fee_taken_project,
    for_project,
)


def extract_entities(
    description: str,
    extractors: Sequence[Extractor] = EXTRACTORS,
) -> EntityMatch:
    """Return ``(project_name, client_name)`` from the first matching extractor."""

    for extractor in extractors:
        found = extractor(description)
        if found is not None:
            return found
    return EntityMatch(None, None)


__all__ = [
    "EntityMatch",
    "EXTRACTORS",
    "extract_entities",
    "from_client_for_project",
    "fee_taken_project",
    "for_project",
]
