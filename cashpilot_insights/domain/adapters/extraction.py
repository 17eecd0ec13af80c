"""
Name extraction from free-text transaction descriptions.

Manual entries carry no customer or product identifiers, so the manual
adapter recovers them from descriptions with an ordered list of patterns.
This is a heuristic: the first pattern that matches wins, and descriptions
that match nothing are simply not attributed. Downstream scoring should not
treat the result as more accurate than that.
"""

import re
from typing import Optional, Protocol, Sequence

CUSTOMER_PATTERNS = (
    re.compile(r"client\s+([^-]+)", re.IGNORECASE),
    re.compile(r"customer\s+([^-]+)", re.IGNORECASE),
    re.compile(r"from\s+([^-]+)", re.IGNORECASE),
    re.compile(r"payment\s+from\s+([^-]+)", re.IGNORECASE),
)

PRODUCT_PATTERNS = (
    re.compile(r"order.*?-\s*([^-]+)", re.IGNORECASE),
    re.compile(r"payment.*?-\s*([^-]+)", re.IGNORECASE),
    re.compile(r"for\s+([^-]+)", re.IGNORECASE),
)


class NameExtractor(Protocol):
    def extract(self, description: str) -> Optional[str]: ...


class PatternExtractor:
    """First-match-wins extraction over an ordered pattern list"""

    def __init__(self, patterns: Sequence[re.Pattern[str]]):
        self.patterns = tuple(patterns)

    def extract(self, description: str) -> Optional[str]:
        if not description:
            return None
        for pattern in self.patterns:
            match = pattern.search(description)
            if match:
                name = match.group(1).strip()
                if name:
                    return name
        return None


class NullExtractor:
    """Disables attribution; transactions still count toward totals"""

    def extract(self, description: str) -> Optional[str]:
        return None


def customer_extractor() -> PatternExtractor:
    return PatternExtractor(CUSTOMER_PATTERNS)


def product_extractor() -> PatternExtractor:
    return PatternExtractor(PRODUCT_PATTERNS)
