"""Directive tags the model embeds in its replies."""

import re
from dataclasses import dataclass
from typing import Optional


REVIEWS = "reviews"
VIEW = "view"
SEARCH = "search"

# Checked in this order; only the first matching kind is acted on.
DIRECTIVE_PATTERNS = (
    (REVIEWS, re.compile(r"\[REVIEWS: ([^\]]+)\]")),
    (VIEW, re.compile(r"\[VIEW: ([^\]]+)\]")),
    (SEARCH, re.compile(r"\[SEARCH: ([^\]]+)\]")),
)


@dataclass(frozen=True)
class Directive:
    kind: str
    argument: str


def parse_directive(text: Optional[str]) -> Optional[Directive]:
    """Return the highest-priority directive in ``text``, if any."""
    if not text:
        return None
    for kind, pattern in DIRECTIVE_PATTERNS:
        match = pattern.search(text)
        if match:
            argument = match.group(1).strip()
            if argument:
                return Directive(kind=kind, argument=argument)
    return None
