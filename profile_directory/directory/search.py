"""Substring search and match highlighting for profile listings."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from profile_directory.directory.models import Profile

SEARCH_FIELDS = ("name", "address")


@dataclass(frozen=True, slots=True)
class Segment:
    text: str
    matched: bool = False

    def to_dict(self) -> dict:
        return {"text": self.text, "matched": self.matched}


def matches(profile: Profile, query: str) -> bool:
    needle = query.lower()
    return any(needle in getattr(profile, field).lower() for field in SEARCH_FIELDS)


def filter_profiles(profiles: Sequence[Profile], query: str) -> List[Profile]:
    """Profiles whose name or address contains ``query``, ignoring case."""
    if not query:
        return list(profiles)
    return [profile for profile in profiles if matches(profile, query)]


def highlight(text: str, query: str) -> List[Segment]:
    """
    Split ``text`` into matched and unmatched segments.

    The query is literal text. Joining the segment texts always gives back
    ``text`` unchanged.
    """
    if not query or not text:
        return [Segment(text)]

    pattern = re.compile(re.escape(query), re.IGNORECASE)
    segments: List[Segment] = []
    cursor = 0
    for match in pattern.finditer(text):
        start, end = match.span()
        if start == end:
            continue
        if start > cursor:
            segments.append(Segment(text[cursor:start]))
        segments.append(Segment(text[start:end], matched=True))
        cursor = end
    if cursor < len(text):
        segments.append(Segment(text[cursor:]))
    return segments or [Segment(text)]


def segments_text(segments: Iterable[Segment]) -> str:
    return "".join(segment.text for segment in segments)
