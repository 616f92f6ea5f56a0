"""
Naming helpers shared by the needle builders and sub-generators
"""

import re
from typing import Iterable, List, TypeVar

T = TypeVar("T")

_WORD_RE = re.compile(r"[A-Z]{2,}(?=[A-Z][a-z]|\d|\b|_)|[A-Z]?[a-z]+|[A-Z]+|\d+")


def split_words(value: str) -> List[str]:
    """Split camelCase, PascalCase, kebab-case and snake_case into words"""
    return _WORD_RE.findall(value or "")


def kebab_case(value: str) -> str:
    """ProductOrder -> product-order"""
    return "-".join(word.lower() for word in split_words(value))


def camel_case(value: str) -> str:
    """product-order -> productOrder"""
    words = split_words(value)
    if not words:
        return ""
    return words[0].lower() + "".join(word.capitalize() for word in words[1:])


def start_case(value: str) -> str:
    """product-order -> Product Order"""
    return " ".join(word[:1].upper() + word[1:] for word in split_words(value))


def lower_first(value: str) -> str:
    """ProductOrder -> productOrder"""
    return value[:1].lower() + value[1:]


def upper_first(value: str) -> str:
    return value[:1].upper() + value[1:]


def unique(items: Iterable[T]) -> List[T]:
    """Deduplicate while keeping first-seen order"""
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result
