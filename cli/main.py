"""Link checker CLI, entry-point for checking documents and posts.

Usage:
    python cli/main.py --help

Commands:
    check     → check the links in files (or stdin)
    posts     → check every post in a WordPress-style SQLite database
    url       → resolve a single URL
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from linkcheck.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
import logging
import sqlite3
from typing import List, Optional

import typer

from linkcheck.config import settings
from linkcheck.db import get_connection, load_posts
from linkcheck.db.models import Post
from linkcheck.report import PostReport, check_posts, render_text
from linkcheck.scanner.checker import LinkChecker

app = typer.Typer(
    name="linkcheck",
    help="Find the links in blog posts and report whether they still work.",
    no_args_is_help=True,
)


def _build_checker() -> LinkChecker:
    """Factory hook so tests can swap in a checker with a mocked transport."""
    return LinkChecker.from_settings()


def _emit(reports: List[PostReport], as_json: bool, only_broken: bool) -> None:
    if as_json:
        payload = [report.to_dict() for report in reports]
        if only_broken:
            for item, report in zip(payload, reports):
                item["links"] = [link.to_dict() for link in report.broken]
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    text = render_text(reports, only_broken=only_broken)
    if not text:
        text = "No broken links found." if only_broken else "No links found."
    typer.echo(text)


def _exit_code(reports: List[PostReport]) -> int:
    return 1 if any(report.broken for report in reports) else 0


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every probe."),
) -> None:
    """Configure logging for all sub-commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# check: files / stdin
# ---------------------------------------------------------------------------
@app.command("check")
def check(
    paths: Optional[List[Path]] = typer.Argument(
        None, help="Files to check. Reads stdin when omitted or '-'."
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit a JSON array."),
    only_broken: bool = typer.Option(False, "--broken", help="Only show failing links."),
) -> None:
    """Check every link found in the given documents."""
    documents: List[Post] = []
    for index, path in enumerate(paths or [Path("-")], start=1):
        if str(path) == "-":
            documents.append(Post(id=index, title="<stdin>", content=sys.stdin.read()))
            continue
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            typer.echo(f"[check] Cannot read {str(path)!r}: {exc}", err=True)
            raise typer.Exit(code=1)
        documents.append(Post(id=index, title=str(path), content=content))

    with _build_checker() as checker:
        reports = [
            PostReport(post=doc, links=checker.check_document(doc.content))
            for doc in documents
        ]

    _emit(reports, as_json, only_broken)
    raise typer.Exit(code=_exit_code(reports))


# ---------------------------------------------------------------------------
# posts: WordPress-style database
# ---------------------------------------------------------------------------
@app.command("posts")
def posts(
    db: Optional[Path] = typer.Option(None, "--db", help="SQLite database (defaults to POSTS_DB)."),
    prefix: str = typer.Option(settings.table_prefix, "--prefix", help="Table prefix."),
    as_json: bool = typer.Option(False, "--json", help="Emit a JSON array."),
    only_broken: bool = typer.Option(False, "--broken", help="Only show failing links."),
) -> None:
    """Check the links of every post in the database, newest first."""
    try:
        conn = get_connection(db)
    except (ValueError, FileNotFoundError) as exc:
        typer.echo(f"[posts] {exc}", err=True)
        raise typer.Exit(code=1)

    try:
        loaded = load_posts(conn, prefix=prefix)
    except (ValueError, sqlite3.Error) as exc:
        typer.echo(f"[posts] Cannot load posts: {exc}", err=True)
        raise typer.Exit(code=1)
    finally:
        conn.close()

    with _build_checker() as checker:
        reports = check_posts(loaded, checker)

    _emit(reports, as_json, only_broken)
    raise typer.Exit(code=_exit_code(reports))


# ---------------------------------------------------------------------------
# url: single link
# ---------------------------------------------------------------------------
@app.command("url")
def url(
    target: str = typer.Argument(..., help="URL to resolve."),
    as_json: bool = typer.Option(False, "--json", help="Emit a JSON object."),
) -> None:
    """Resolve a single URL and describe its status."""
    with _build_checker() as checker:
        status = checker.resolve(target)

    if as_json:
        typer.echo(json.dumps(status.to_dict(), indent=2, ensure_ascii=False))
    else:
        typer.echo(f"{status.url}: {status.description}")
    raise typer.Exit(code=0 if status.good else 1)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
