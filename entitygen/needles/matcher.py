"""
Needle registry and matcher

A needle is a sentinel comment left in a generated file, e.g.

    <!-- jhipster-needle-add-entity-to-menu - JHipster will add entities to the menu here -->

New content is spliced next to the line holding it.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class Needle(str, Enum):
    """Known client needles"""
    ENTITY_TO_MENU = "jhipster-needle-add-entity-to-menu"
    ENTITY_TO_ROUTER_IMPORT = "jhipster-needle-add-entity-to-router-import"
    ENTITY_TO_ROUTER = "jhipster-needle-add-entity-to-router"
    ENTITY_SERVICE_TO_MAIN_IMPORT = "jhipster-needle-add-entity-service-to-main-import"
    ENTITY_SERVICE_TO_MAIN = "jhipster-needle-add-entity-service-to-main"


NeedleId = Union[Needle, str]


@dataclass(frozen=True)
class NeedleMatch:
    """Position of a needle inside a file's text"""
    needle: str
    line_index: int
    offset: int
    indent: str


def needle_value(needle: NeedleId) -> str:
    return needle.value if isinstance(needle, Needle) else needle


def _pattern(needle: NeedleId) -> "re.Pattern[str]":
    # Whole token only: ...-to-router must not match inside ...-to-router-import
    return re.compile(r"(?<![\w-])" + re.escape(needle_value(needle)) + r"(?![\w-])")


def locate(text: str, needle: NeedleId) -> Optional[NeedleMatch]:
    """Find the first occurrence of a needle, None when the file has none"""
    pattern = _pattern(needle)
    offset = 0
    for index, line in enumerate(text.splitlines(keepends=True)):
        found = pattern.search(line)
        if found:
            indent = line[:len(line) - len(line.lstrip(" \t"))]
            return NeedleMatch(
                needle=needle_value(needle),
                line_index=index,
                offset=offset + found.start(),
                indent=indent,
            )
        offset += len(line)
    return None


def count(text: str, needle: NeedleId) -> int:
    """Number of occurrences of a needle"""
    return len(_pattern(needle).findall(text))
