"""Token substitution for template names and contents.

Markers are literal ``{NAME}`` strings from a closed set. All markers are
replaced in one scan, so a value that itself contains a marker is copied
verbatim instead of being expanded again.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING

from .errors import MissingValueError

if TYPE_CHECKING:
    from .config import PlateConfig


class Token(str, Enum):
    """Recognized template tokens."""

    PROJECT = "PROJECT"
    AUTHOR = "AUTHOR"
    YEAR = "YEAR"
    TODAY = "TODAY"
    DATE = "DATE"
    ORGANIZATION = "ORGANIZATION"
    BUNDLEID = "BUNDLEID"

    @property
    def marker(self) -> str:
        return "{" + self.value + "}"


_MARKER_PATTERN = re.compile("|".join(re.escape(token.marker) for token in Token))
_TOKENS_BY_MARKER = {token.marker: token for token in Token}


@dataclass(frozen=True)
class SubstitutionSet(Mapping[Token, str]):
    """Resolved token values for one rewrite run."""

    project: str
    author: str
    year: str
    today: str
    date: str
    organization: str
    bundle_id: str

    def _values(self) -> dict[Token, str]:
        return {
            Token.PROJECT: self.project,
            Token.AUTHOR: self.author,
            Token.YEAR: self.year,
            Token.TODAY: self.today,
            Token.DATE: self.date,
            Token.ORGANIZATION: self.organization,
            Token.BUNDLEID: self.bundle_id,
        }

    def __getitem__(self, token: Token | str) -> str:
        try:
            return self._values()[Token(token)]
        except ValueError:
            raise KeyError(token) from None

    def __iter__(self) -> Iterator[Token]:
        return iter(Token)

    def __len__(self) -> int:
        return len(Token)

    def to_dict(self) -> dict[str, str]:
        return {token.value: value for token, value in self._values().items()}


def format_short_date(day: date) -> str:
    """Locale short date, e.g. ``10/17/26`` in the C/en_US locale."""
    return day.strftime("%x")


def format_medium_date(day: date) -> str:
    """Medium human-readable date, e.g. ``Oct 17, 2026``."""
    return f"{day:%b} {day.day}, {day.year}"


def build_substitution_set(
    project: str,
    author: str,
    config: "PlateConfig",
    *,
    organization: str | None = None,
    bundle_id: str | None = None,
    today: date | None = None,
) -> SubstitutionSet:
    """Resolve every token value for a run.

    ``organization`` and ``bundle_id`` override the configured defaults.
    All date tokens derive from the same ``today`` so a run is consistent.

    Raises:
        MissingValueError: If any resolved value is empty.
    """
    day = today or date.today()
    values = SubstitutionSet(
        project=(project or "").strip(),
        author=(author or "").strip(),
        year=str(day.year),
        today=format_short_date(day),
        date=format_medium_date(day),
        organization=(organization or config.organization_name or "").strip(),
        bundle_id=(bundle_id or config.bundle_id or "").strip(),
    )
    for token, value in values.items():
        if not value:
            raise MissingValueError(token.value)
    return values


def substitute(text: str, values: Mapping[Token, str]) -> str:
    """Replace every recognized marker in ``text``.

    Unknown placeholders, and tokens missing from ``values``, are left as
    they are.
    """
    return _MARKER_PATTERN.sub(
        lambda match: values.get(_TOKENS_BY_MARKER[match.group(0)], match.group(0)),
        text,
    )


def count_tokens(text: str) -> dict[Token, int]:
    """Return how many times each recognized marker occurs in ``text``."""
    counts: dict[Token, int] = {}
    for match in _MARKER_PATTERN.finditer(text):
        token = _TOKENS_BY_MARKER[match.group(0)]
        counts[token] = counts.get(token, 0) + 1
    return counts


__all__ = [
    "SubstitutionSet",
    "Token",
    "build_substitution_set",
    "count_tokens",
    "format_medium_date",
    "format_short_date",
    "substitute",
]
