"""Statement shapes against the users table.

Each scenario has a ``*_query()`` builder returning the unexecuted
statement (so its SQL can be inspected with ``debug_query``) and a
function of the same name without the suffix that executes it.
"""

import logging

from sqlalchemy.engine import Connection, RowMapping

from .. import facade
from ..forms import UserForm, parse_user_form, parse_user_forms
from ..persistence import executor
from ..persistence.connection import transaction
from ..persistence.models import User
from ..persistence.tables import users
from ..sql import (
    InsertStatement,
    SelectStatement,
    UpdateStatement,
    delete,
    desc,
    eq,
    insert_into,
    insert_or_ignore_into,
    replace_into,
    select,
    update,
)

logger = logging.getLogger(__name__)

SINGLE_FORM_JSON = '{ "name": "Sean", "hair_color": "Black" }'
OPTION_FORM_JSON = '{ "name": "Ruby", "hair_color": null }'
BATCH_FORM_JSON = """[
    { "name": "Sean", "hair_color": "Black" },
    { "name": "Tess", "hair_color": "Brown" }
]"""


def row_to_user(row: RowMapping) -> User:
    return User(
        id=row["id"],
        name=row["name"],
        hair_color=row["hair_color"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


# === Inserts ===


def insert_default_values_query() -> InsertStatement:
    return insert_into(users).default_values()


def insert_default_values(conn: Connection) -> int:
    """Fails with DatabaseError: ``name`` has no default."""
    return executor.execute(conn, insert_default_values_query())


def insert_single_column_query() -> InsertStatement:
    return insert_into(users).values(eq(users.c.name, "Sean"))


def insert_single_column(conn: Connection) -> int:
    return executor.execute(conn, insert_single_column_query())


def insert_multiple_columns_query() -> InsertStatement:
    return insert_into(users).values((eq(users.c.name, "Tess"), eq(users.c.hair_color, "Brown")))


def insert_multiple_columns(conn: Connection) -> int:
    return executor.execute(conn, insert_multiple_columns_query())


def insertable_struct_query(form: UserForm) -> InsertStatement:
    return insert_into(users).values(form.as_row())


def insert_insertable_struct(conn: Connection) -> int:
    form = parse_user_form(SINGLE_FORM_JSON)
    return executor.execute(conn, insertable_struct_query(form))


def insert_insertable_struct_option(conn: Connection) -> int:
    form = parse_user_form(OPTION_FORM_JSON)
    return executor.execute(conn, insertable_struct_query(form))


def insert_single_column_batch_query() -> InsertStatement:
    return insert_into(users).values([eq(users.c.name, "Sean"), eq(users.c.name, "Tess")])


def insert_single_column_batch(conn: Connection) -> int:
    return executor.execute(conn, insert_single_column_batch_query())


def insert_single_column_batch_with_default_query() -> InsertStatement:
    return insert_into(users).values([eq(users.c.name, "Sean"), None])


def insert_single_column_batch_with_default(conn: Connection) -> int:
    """Fails with DatabaseError: the second row defaults ``name``, which has no default."""
    return executor.execute(conn, insert_single_column_batch_with_default_query())


def insert_tuple_batch_query() -> InsertStatement:
    return insert_into(users).values(
        [
            (eq(users.c.name, "Sean"), eq(users.c.hair_color, "Black")),
            (eq(users.c.name, "Tess"), eq(users.c.hair_color, "Brown")),
        ]
    )


def insert_tuple_batch(conn: Connection) -> int:
    return executor.execute(conn, insert_tuple_batch_query())


def insert_tuple_batch_with_default_query() -> InsertStatement:
    return insert_into(users).values(
        [
            (eq(users.c.name, "Sean"), eq(users.c.hair_color, "Black")),
            (eq(users.c.name, "Ruby"), None),
        ]
    )


def insert_tuple_batch_with_default(conn: Connection) -> int:
    return executor.execute(conn, insert_tuple_batch_with_default_query())


def insertable_struct_batch_query(forms: list[UserForm]) -> InsertStatement:
    return insert_into(users).values([form.as_row() for form in forms])


def insert_insertable_struct_batch(conn: Connection) -> int:
    forms = parse_user_forms(BATCH_FORM_JSON)
    return executor.execute(conn, insertable_struct_batch_query(forms))


# === Returning emulation ===


def load_newest_first_query() -> SelectStatement:
    return select(users).order_by(desc(users.c.id))


def _numbered_rows() -> list[tuple]:
    return [
        (eq(users.c.id, 1), eq(users.c.name, "Sean")),
        (eq(users.c.id, 2), eq(users.c.name, "Tess")),
    ]


def insert_get_results_batch_query() -> InsertStatement:
    return insert_into(users).values(_numbered_rows())


def insert_get_results_batch(conn: Connection) -> list[User]:
    rows = facade.insert_returning(conn, users, _numbered_rows())
    return [row_to_user(row) for row in rows]


def insert_get_result_query() -> InsertStatement:
    return insert_into(users).values((eq(users.c.id, 3), eq(users.c.name, "Ruby")))


def insert_get_result(conn: Connection) -> User:
    with transaction(conn):
        executor.execute(conn, insert_get_result_query())
        return row_to_user(executor.first(conn, load_newest_first_query()))


def explicit_returning_query() -> SelectStatement:
    return select(users).columns(users.c.id).order_by(desc(users.c.id))


def explicit_returning(conn: Connection) -> int:
    """Insert Ruby and return the id it was assigned."""
    with transaction(conn):
        executor.execute(conn, insert_into(users).values(eq(users.c.name, "Ruby")))
        return executor.first(conn, explicit_returning_query())["id"]


# === Reads ===


def all_names_query() -> SelectStatement:
    return select(users).columns(users.c.name)


def distinct_names_query() -> SelectStatement:
    return all_names_query().distinct()


def count_query() -> SelectStatement:
    return select(users).count()


def some_users_query() -> SelectStatement:
    return (
        select(users)
        .order_by(desc(users.c.created_at), desc(users.c.id))
        .filter(eq(users.c.name, "Ruby"))
        .limit(5)
    )


def some_users(conn: Connection) -> list[User]:
    all_names = [row["name"] for row in executor.load(conn, all_names_query())]
    print(f"all_name : {all_names}")

    distinct_names = [row["name"] for row in executor.load(conn, distinct_names_query())]
    print(f"distinct_name : {distinct_names}")

    # rows produced by the COUNT statement itself, not the user count
    count_rows = len(executor.load(conn, count_query()))
    print(f"there are {count_rows} users ?")

    total = executor.scalar(conn, count_query())
    print(f"there are {total} users !")

    return [row_to_user(row) for row in executor.load(conn, some_users_query())]


def all_users(conn: Connection) -> list[User]:
    return [row_to_user(row) for row in facade.sql_query(conn, "SELECT * FROM users ORDER BY id")]


# === Updates, deletes, upserts ===


def delete_all_users_query():
    return delete(users)


def delete_all_users(conn: Connection) -> int:
    return executor.execute(conn, delete_all_users_query())


def rename_rust_query() -> UpdateStatement:
    return (
        update(users)
        .filter(eq(users.c.name, "Rust"))
        .set(eq(users.c.name, "Ruby"), eq(users.c.hair_color, "yellow"))
    )


def rename_first_user_query() -> UpdateStatement:
    return update(users).find(1).set(eq(users.c.name, "James"))


def update_users(conn: Connection) -> int:
    updated = executor.execute(conn, rename_rust_query())
    print(f"update Rust to Ruby, updated_row : {updated}")
    return executor.execute(conn, rename_first_user_query())


def replace_batch_query() -> InsertStatement:
    return replace_into(users).values(
        [
            (eq(users.c.id, 1), eq(users.c.name, "Sean2")),
            (eq(users.c.id, 2), eq(users.c.name, "Tess2")),
        ]
    )


def replace_single_query() -> InsertStatement:
    return replace_into(users).values((eq(users.c.id, 1), eq(users.c.name, "Jim")))


def ignore_single_query() -> InsertStatement:
    return insert_or_ignore_into(users).values((eq(users.c.id, 1), eq(users.c.name, "Jim")))


def ignore_batch_query() -> InsertStatement:
    return insert_or_ignore_into(users).values(_numbered_rows())


def names_by_id(conn: Connection) -> list[str]:
    query = select(users).columns(users.c.name).order_by(users.c.id)
    return [row["name"] for row in executor.load(conn, query)]


def replace_into_users(conn: Connection) -> list[str]:
    """Upsert ids 1 and 2, then try to re-insert them with INSERT IGNORE."""
    executor.execute(conn, replace_batch_query())
    executor.execute(conn, replace_single_query())
    print(names_by_id(conn))

    executor.execute(conn, ignore_single_query())
    executor.execute(conn, ignore_batch_query())
    names = names_by_id(conn)
    print(names)
    return names
