"""Statement shapes against the posts table, used by the post commands."""

from sqlalchemy.engine import Connection, RowMapping

from .. import facade
from ..persistence import executor
from ..persistence.models import NewPost, Post
from ..persistence.tables import posts
from ..sql import (
    DeleteStatement,
    SelectStatement,
    UpdateStatement,
    delete,
    eq,
    like,
    select,
    update,
)


def row_to_post(row: RowMapping) -> Post:
    return Post(
        id=row["id"],
        title=row["title"],
        body=row["body"],
        published=bool(row["published"]),
    )


def create_post(conn: Connection, title: str, body: str) -> Post:
    """Insert a draft post and return it as stored."""
    (row,) = facade.insert_returning(conn, posts, NewPost(title=title, body=body))
    return row_to_post(row)


def delete_matching_query(target: str) -> DeleteStatement:
    return delete(posts).filter(like(posts.c.title, f"%{target}%"))


def delete_posts_matching(conn: Connection, target: str) -> int:
    """Delete every post whose title contains ``target``."""
    return executor.execute(conn, delete_matching_query(target))


def delete_post_query(post_id: int) -> DeleteStatement:
    return delete(posts).find(post_id)


def delete_post(conn: Connection, post_id: int) -> int:
    """Delete one post by id; returns 0 or 1."""
    return executor.execute(conn, delete_post_query(post_id))


def publish_post_query(post_id: int) -> UpdateStatement:
    return update(posts).find(post_id).set(eq(posts.c.published, True))


def publish_post(conn: Connection, post_id: int) -> int:
    return executor.execute(conn, publish_post_query(post_id))


def published_posts_query(limit: int = 5) -> SelectStatement:
    return select(posts).filter(eq(posts.c.published, True)).limit(limit)


def published_posts(conn: Connection, limit: int = 5) -> list[Post]:
    return [row_to_post(row) for row in executor.iter_rows(conn, published_posts_query(limit))]
