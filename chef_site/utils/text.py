"""Slug and reading-time helpers for blog content."""
import math
import re

WORDS_PER_MINUTE = 200

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHEN_RUNS = re.compile(r"-+")


def slugify(value: str) -> str:
    """
    Derive a URL slug from a title.

    Lowercases, drops everything except letters, digits, spaces and hyphens,
    turns whitespace runs into a single hyphen and collapses repeated hyphens.

    >>> slugify("Fresh Basil Pesto!")
    'fresh-basil-pesto'
    """
    slug = _NON_SLUG_CHARS.sub("", value.lower()).strip()
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHEN_RUNS.sub("-", slug)
    return slug.strip("-")


def reading_time(content: str) -> int:
    """Minutes to read `content` at 200 words per minute, never less than 1."""
    words = len(content.split())
    return max(1, math.ceil(words / WORDS_PER_MINUTE))
