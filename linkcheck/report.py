"""Per-post link reports.

``check_posts`` runs every post body through a :class:`LinkChecker` and
keeps the posts that mention at least one link, newest first.  The checker's
cache is shared across posts, so a URL linked from ten posts is probed once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List

from linkcheck.db.models import Post
from linkcheck.scanner.checker import LinkChecker
from linkcheck.scanner.models import LinkStatus


@dataclass
class PostReport:
    """The checked links of a single post."""

    post: Post
    links: List[LinkStatus] = field(default_factory=list)

    @property
    def broken(self) -> List[LinkStatus]:
        return [link for link in self.links if not link.good]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.post.id,
            "title": self.post.title,
            "links": [link.to_dict() for link in self.links],
        }


def check_posts(posts: Iterable[Post], checker: LinkChecker) -> List[PostReport]:
    """Check the links of every post in *posts*.

    Posts without any link are left out; the rest are ordered by descending
    post id (newest first).
    """
    reports: List[PostReport] = []
    for post in posts:
        links = checker.check_document(post.content)
        if links:
            reports.append(PostReport(post=post, links=links))
    reports.sort(key=lambda report: report.post.id, reverse=True)
    return reports


def _display_url(url: str) -> str:
    for scheme in ("https://", "http://"):
        if url.startswith(scheme):
            return url[len(scheme):]
    return url


def render_text(reports: Iterable[PostReport], only_broken: bool = False) -> str:
    """Render *reports* as plain text, one heading per post.

    Args:
        reports: Reports as returned by :func:`check_posts`.
        only_broken: Hide good links, and posts left with nothing to show.
    """
    lines: List[str] = []
    for report in reports:
        links = report.broken if only_broken else report.links
        if not links:
            continue
        if lines:
            lines.append("")
        lines.append(f"» {report.post.title}")
        for link in links:
            lines.append(f"  - {_display_url(link.url)}: {link.description}")
    return "\n".join(lines)
