"""Development-area classification for changed paths and commit messages.

Two independent classifiers:
- ``area_of`` maps a folder to at most one area (first matching rule wins).
- ``areas_from_message`` maps commit message text to every matching area.
"""

from __future__ import annotations

import re
from typing import Optional

ROOT_FOLDER = "/root"

# Ordered: the first rule whose substrings occur in the lower-cased folder wins.
_FOLDER_AREA_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("test", "spec"), "testing"),
    (("doc",), "documentation"),
    (("src/api", "/api/"), "api"),
    (("frontend", "client", "ui"), "frontend"),
    (("backend", "server"), "backend"),
    (("config", ".github"), "configuration"),
    (("public", "static", "assets"), "assets"),
    (("style", "css"), "styling"),
    (("component",), "components"),
    (("service",), "services"),
    (("util", "helper"), "utilities"),
    (("model", "schema"), "data-models"),
)

_MESSAGE_AREA_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\b(frontend|front-end|ui|client)\b", re.IGNORECASE), "frontend"),
    (re.compile(r"\b(backend|back-end|server|api)\b", re.IGNORECASE), "backend"),
    (re.compile(r"\b(database|db|sql|mongo)\b", re.IGNORECASE), "database"),
    (re.compile(r"\b(test|testing|spec|jest|mocha)\b", re.IGNORECASE), "testing"),
    (re.compile(r"\b(docs?|documentation|readme)\b", re.IGNORECASE), "documentation"),
    (re.compile(r"\b(config|configuration|setup|env)\b", re.IGNORECASE), "configuration"),
    (re.compile(r"\b(ci|cd|pipeline|deploy|build)\b", re.IGNORECASE), "devops"),
    (re.compile(r"\b(auth|authentication|login|security)\b", re.IGNORECASE), "authentication"),
    (re.compile(r"\b(style|css|scss|styling)\b", re.IGNORECASE), "styling"),
    (re.compile(r"\b(fix|bug|issue|error)\b", re.IGNORECASE), "bug-fixes"),
    (re.compile(r"\b(feature|feat|add|new)\b", re.IGNORECASE), "features"),
    (re.compile(r"\b(refactor|cleanup|improve)\b", re.IGNORECASE), "refactoring"),
    (re.compile(r"\b(infra|infrastructure|devops)\b", re.IGNORECASE), "infrastructure"),
)


def folder_of(path: str) -> str:
    """Containing folder of a repo-relative path, e.g. ``a/b/c.txt`` -> ``/a/b``."""
    parts = path.split("/")
    if len(parts) == 1:
        return ROOT_FOLDER
    return "/" + "/".join(parts[:-1])


def area_of(folder: str) -> Optional[str]:
    lower = folder.lower()
    for needles, area in _FOLDER_AREA_RULES:
        if any(needle in lower for needle in needles):
            return area
    return None


def areas_from_message(message: str) -> list[str]:
    """All areas whose keywords occur in ``message``, in rule order."""
    if not message:
        return []
    return [area for pattern, area in _MESSAGE_AREA_RULES if pattern.search(message)]
