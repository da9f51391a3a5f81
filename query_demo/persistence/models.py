"""Data models for rows of the users and posts tables."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass
class User:
    """A row of ``users``. Timestamps are filled by the server."""

    id: int
    name: str
    hair_color: str | None
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "hair_color": self.hair_color,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass
class Post:
    """A row of ``posts``."""

    id: int
    title: str
    body: str
    published: bool = False


@dataclass
class NewPost:
    """Insertable shape of a post; ``published`` takes the column default."""

    title: str
    body: str
