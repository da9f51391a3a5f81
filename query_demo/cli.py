"""
Command-line interface for query-demo.

Usage:
    query-demo add-user                 Insert users with every insert shape
    query-demo delete-post TARGET       Delete posts whose title contains TARGET
    query-demo publish-post ID          Mark a post as published
    query-demo show-posts               List published posts
    query-demo show-users               List users
    query-demo write-post TITLE BODY    Save a draft post
    query-demo migrate                  Create or upgrade the schema

Each command is also installed as a standalone script (add_user,
delete_post, publish_post, show_posts, show_users, write_post).
"""

import argparse
import logging
import sys

from query_demo.config import Config, load_config, setup_logging
from query_demo.exceptions import DatabaseError
from query_demo.persistence.connection import establish_connection
from query_demo.persistence.models import User
from query_demo.scenarios import posts, users

logger = logging.getLogger(__name__)


def cmd_add_user(args: argparse.Namespace, config: Config) -> int:
    """Exercise every insert shape against the users table."""
    with establish_connection(config.database) as conn:
        try:
            affected = users.insert_default_values(conn)
            print(f"affected row : {affected}")
        except DatabaseError as e:
            print(f"some error : {e}", file=sys.stderr)

        affected = users.insert_single_column(conn)
        print(f"insert_single_column affected_row = {affected}")

        affected = users.insert_multiple_columns(conn)
        print(f"insert_multiple_columns affected_row = {affected}")

        users.insert_insertable_struct(conn)
        users.insert_insertable_struct_option(conn)
        users.insert_single_column_batch(conn)

        try:
            users.insert_single_column_batch_with_default(conn)
        except DatabaseError as e:
            print(f"insert_single_column_batch_with_default  {e}")

        affected = users.insert_tuple_batch(conn)
        print(f"insert_tuple_batch affected_row = {affected}")

        affected = users.insert_tuple_batch_with_default(conn)
        print(f"insert_tuple_batch_with_default affected_row = {affected}")

        users.insert_insertable_struct_batch(conn)

        new_id = users.explicit_returning(conn)
        print(f"return id = {new_id}")
    return 0


def cmd_delete_post(args: argparse.Namespace, config: Config) -> int:
    """Delete posts by title substring, and optionally one post by id."""
    with establish_connection(config.database) as conn:
        deleted = posts.delete_posts_matching(conn, args.target)
        print(f"Deleted {deleted} posts")

        if args.id is not None:
            deleted = posts.delete_post(conn, args.id)
            print(f"Deleted post which id = {args.id} , is Ok : {deleted == 1}")
    return 0


def cmd_publish_post(args: argparse.Namespace, config: Config) -> int:
    with establish_connection(config.database) as conn:
        updated = posts.publish_post(conn, args.id)
    print(f"update_row : {updated}")
    return 0


def cmd_show_posts(args: argparse.Namespace, config: Config) -> int:
    with establish_connection(config.database) as conn:
        results = posts.published_posts(conn, limit=args.limit)

    print(f"Displaying {len(results)} posts")
    for post in results:
        print(f"{post.title},{post.body}")
    return 0


def cmd_show_users(args: argparse.Namespace, config: Config) -> int:
    with establish_connection(config.database) as conn:
        for user in users.some_users(conn):
            _print_user(user)

        print("---------------------")

        for user in users.all_users(conn):
            _print_user(user)
    return 0


def _print_user(user: User) -> None:
    print(
        f"id:{user.id},name:{user.name},hair color:{user.hair_color!r}, "
        f"created at :{user.created_at}"
    )


def cmd_write_post(args: argparse.Namespace, config: Config) -> int:
    with establish_connection(config.database) as conn:
        post = posts.create_post(conn, args.title, args.body)
    print(f"Saved draft {post.title} with id {post.id}")
    return 0


def cmd_migrate(args: argparse.Namespace, config: Config) -> int:
    """Upgrade the schema with Alembic."""
    from query_demo.persistence.migrations import upgrade_schema

    upgrade_schema(config.database, args.revision)
    print(f"Schema upgraded to {args.revision}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="query-demo - typed SQL statement builder against MySQL",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to configuration file",
    )
    parser.add_argument(
        "--log-level",
        "-l",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level override",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    add_user_parser = subparsers.add_parser("add-user", help="Insert users with every insert shape")
    add_user_parser.set_defaults(func=cmd_add_user)

    delete_parser = subparsers.add_parser("delete-post", help="Delete posts by title or id")
    delete_parser.add_argument("target", type=str, help="Substring to match against post titles")
    delete_parser.add_argument(
        "--id",
        type=int,
        default=None,
        help="Also delete the post with this id",
    )
    delete_parser.set_defaults(func=cmd_delete_post)

    publish_parser = subparsers.add_parser("publish-post", help="Mark a post as published")
    publish_parser.add_argument("id", type=int, help="Post id")
    publish_parser.set_defaults(func=cmd_publish_post)

    show_posts_parser = subparsers.add_parser("show-posts", help="List published posts")
    show_posts_parser.add_argument(
        "--limit",
        "-n",
        type=int,
        default=5,
        help="Maximum number of posts (default: 5)",
    )
    show_posts_parser.set_defaults(func=cmd_show_posts)

    show_users_parser = subparsers.add_parser("show-users", help="List users")
    show_users_parser.set_defaults(func=cmd_show_users)

    write_parser = subparsers.add_parser("write-post", help="Save a draft post")
    write_parser.add_argument("title", type=str)
    write_parser.add_argument("body", type=str)
    write_parser.set_defaults(func=cmd_write_post)

    migrate_parser = subparsers.add_parser("migrate", help="Create or upgrade the schema")
    migrate_parser.add_argument(
        "--revision",
        type=str,
        default="head",
        help="Target revision (default: head)",
    )
    migrate_parser.set_defaults(func=cmd_migrate)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Load config once and hand it to the command
    config = load_config(args.config)
    if args.log_level:
        config.logging.level = args.log_level
    setup_logging(config.logging)

    if args.command is None:
        parser.print_help()
        return 1

    return args.func(args, config)


def _standalone(command: str) -> int:
    return main([command, *sys.argv[1:]])


def add_user() -> int:
    return _standalone("add-user")


def delete_post() -> int:
    return _standalone("delete-post")


def publish_post() -> int:
    return _standalone("publish-post")


def show_posts() -> int:
    return _standalone("show-posts")


def show_users() -> int:
    return _standalone("show-users")


def write_post() -> int:
    return _standalone("write-post")


if __name__ == "__main__":
    sys.exit(main())
