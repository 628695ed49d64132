"""Link checking endpoints.

Routes
------
POST /check         Body: {"text": "..."}                       → check_document
POST /check/posts   Body: {"posts": [{"id", "title", "content"}]} → check_posts
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from linkcheck.db.models import Post
from linkcheck.report import check_posts

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class TextCheckRequest(BaseModel):
    text: str


class PostIn(BaseModel):
    id: int
    title: str = ""
    content: str


class PostsCheckRequest(BaseModel):
    posts: list[PostIn] = Field(default_factory=list)


class LinkResult(BaseModel):
    url: str
    actual_url: str
    title: Optional[str] = None
    http_code: int
    good: bool
    description: str
    error_kind: Optional[str] = None


class PostResult(BaseModel):
    id: int
    title: str
    links: list[LinkResult]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("", response_model=list[LinkResult])
def check_text_endpoint(body: TextCheckRequest, request: Request) -> list[dict[str, Any]]:
    """Check every link found in ``text``, in order of first appearance.

    Unreachable links are reported in the results, never as an HTTP error.
    """
    checker = request.app.state.checker
    return [status.to_dict() for status in checker.check_document(body.text)]


@router.post("/posts", response_model=list[PostResult])
def check_posts_endpoint(body: PostsCheckRequest, request: Request) -> list[dict[str, Any]]:
    """Check a batch of posts; posts without links are omitted, newest first."""
    checker = request.app.state.checker
    posts = [Post(id=p.id, title=p.title, content=p.content) for p in body.posts]
    return [report.to_dict() for report in check_posts(posts, checker)]
