"""Dataclass models representing DB rows.

These are plain Python objects – not ORM models.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Post:
    id: int
    title: str
    content: str
