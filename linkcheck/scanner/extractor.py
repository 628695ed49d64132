"""Link extraction: finds the distinct URLs mentioned in a post body."""

from __future__ import annotations

import re
from typing import List

# A URL may contain sentence punctuation but never ends with it, so the
# trailing "." in "see https://example.com." stays outside the match.
_URL_PATTERN = re.compile(
    r"\bhttps?://[-A-Z0-9+&@#/%?=~_|!:,.;]*[-A-Z0-9+&@#/%=~_|]",
    re.IGNORECASE | re.ASCII,
)


def extract_links(text: str) -> List[str]:
    """Return the URLs found in *text*, deduplicated in order of first appearance.

    Deduplication is by exact string equality: ``https://a.com`` and
    ``https://A.com`` are two different links.  Text without any URL yields
    an empty list.
    """
    seen: set[str] = set()
    links: List[str] = []
    for m in _URL_PATTERN.finditer(text):
        url = m.group(0)
        if url not in seen:
            seen.add(url)
            links.append(url)
    return links
