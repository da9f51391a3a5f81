"""Tests for INSERT, REPLACE and INSERT IGNORE rendering."""

from dataclasses import dataclass

import pytest

from query_demo.exceptions import EmptyBatchError
from query_demo.persistence.models import NewPost
from query_demo.persistence.tables import posts, users
from query_demo.sql import (
    compile_query,
    debug_query,
    eq,
    insert_into,
    insert_or_ignore_into,
    replace_into,
)


class TestSingleRow:
    def test_default_values(self):
        query = insert_into(users).default_values()
        assert debug_query(query) == "INSERT INTO `users` () VALUES () -- binds: []"

    def test_single_column(self):
        query = insert_into(users).values(eq(users.c.name, "Sean"))
        assert debug_query(query) == 'INSERT INTO `users` (`name`) VALUES (?) -- binds: ["Sean"]'

    def test_tuple_of_columns(self):
        query = insert_into(users).values((eq(users.c.name, "Tess"), eq(users.c.hair_color, "Brown")))
        assert debug_query(query) == (
            "INSERT INTO `users` (`name`, `hair_color`) VALUES (?, ?) "
            '-- binds: ["Tess", "Brown"]'
        )

    def test_mapping_row_with_none_renders_default(self):
        query = insert_into(users).values({"name": "Ruby", "hair_color": None})
        assert debug_query(query) == (
            "INSERT INTO `users` (`name`, `hair_color`) VALUES (?, DEFAULT) "
            '-- binds: ["Ruby"]'
        )

    def test_dataclass_row(self):
        query = insert_into(posts).values(NewPost(title="Hello", body="World"))
        assert debug_query(query) == (
            'INSERT INTO `posts` (`title`, `body`) VALUES (?, ?) -- binds: ["Hello", "World"]'
        )

    def test_explicit_none_binds_null(self):
        query = insert_into(users).values((eq(users.c.name, "Ruby"), eq(users.c.hair_color, None)))
        compiled = compile_query(query)
        assert compiled.sql == "INSERT INTO `users` (`name`, `hair_color`) VALUES (?, ?)"
        assert compiled.binds == ("Ruby", None)
        assert str(compiled).endswith('-- binds: ["Ruby", null]')

    def test_integer_binds_render_bare(self):
        query = insert_into(users).values((eq(users.c.id, 3), eq(users.c.name, "Ruby")))
        assert debug_query(query) == (
            'INSERT INTO `users` (`id`, `name`) VALUES (?, ?) -- binds: [3, "Ruby"]'
        )


class TestBatch:
    def test_single_column_batch(self):
        query = insert_into(users).values([eq(users.c.name, "Sean"), eq(users.c.name, "Tess")])
        assert debug_query(query) == (
            'INSERT INTO `users` (`name`) VALUES (?), (?) -- binds: ["Sean", "Tess"]'
        )

    def test_none_row_renders_default(self):
        query = insert_into(users).values([eq(users.c.name, "Sean"), None])
        assert debug_query(query) == (
            'INSERT INTO `users` (`name`) VALUES (?), (DEFAULT) -- binds: ["Sean"]'
        )

    def test_default_is_per_row(self):
        query = insert_into(users).values(
            [
                (eq(users.c.name, "Sean"), eq(users.c.hair_color, "Black")),
                (eq(users.c.name, "Ruby"), None),
            ]
        )
        assert debug_query(query) == (
            "INSERT INTO `users` (`name`, `hair_color`) VALUES (?, ?), (?, DEFAULT) "
            '-- binds: ["Sean", "Black", "Ruby"]'
        )

    def test_column_order_is_first_appearance(self):
        query = insert_into(users).values(
            [
                {"hair_color": "Black", "name": "Sean"},
                {"name": "Tess", "hair_color": "Brown"},
            ]
        )
        compiled = compile_query(query)
        assert compiled.sql == "INSERT INTO `users` (`hair_color`, `name`) VALUES (?, ?), (?, ?)"
        assert compiled.binds == ("Black", "Sean", "Brown", "Tess")

    def test_column_declared_only_by_later_row(self):
        query = insert_into(users).values(
            [
                (eq(users.c.name, "Sean"), None),
                (eq(users.c.name, "Tess"), eq(users.c.hair_color, "Brown")),
            ]
        )
        assert debug_query(query) == (
            "INSERT INTO `users` (`name`, `hair_color`) VALUES (?, DEFAULT), (?, ?) "
            '-- binds: ["Sean", "Tess", "Brown"]'
        )

    def test_every_row_has_same_width(self):
        query = insert_into(users).values(
            [
                {"name": "Sean", "hair_color": "Black"},
                {"name": "Ruby"},
                None,
            ]
        )
        assert query.row_count == 3
        assert all(len(row) == len(query.columns) for row in query.rows)

    def test_empty_batch_fails(self):
        with pytest.raises(EmptyBatchError):
            insert_into(users).values([])

    def test_batch_of_only_none_fails(self):
        with pytest.raises(EmptyBatchError):
            insert_into(users).values([None, None])

    def test_single_none_row_fails(self):
        with pytest.raises(EmptyBatchError):
            insert_into(users).values(None)

    def test_empty_batch_error_is_value_error(self):
        with pytest.raises(ValueError):
            insert_into(users).values([])


class TestVerbs:
    def test_replace_into(self):
        query = replace_into(users).values((eq(users.c.id, 1), eq(users.c.name, "Jim")))
        assert debug_query(query) == (
            'REPLACE INTO `users` (`id`, `name`) VALUES (?, ?) -- binds: [1, "Jim"]'
        )

    def test_insert_or_ignore_into(self):
        query = insert_or_ignore_into(users).values((eq(users.c.id, 1), eq(users.c.name, "Jim")))
        assert debug_query(query) == (
            'INSERT IGNORE INTO `users` (`id`, `name`) VALUES (?, ?) -- binds: [1, "Jim"]'
        )


class TestValidation:
    def test_unknown_mapping_key(self):
        with pytest.raises(ValueError, match="Unknown column 'age'"):
            insert_into(users).values({"name": "Sean", "age": 3})

    def test_column_from_other_table(self):
        with pytest.raises(ValueError, match="does not belong to users"):
            insert_into(users).values(eq(posts.c.title, "Hello"))

    def test_column_assigned_twice(self):
        with pytest.raises(ValueError, match="assigned twice"):
            insert_into(users).values((eq(users.c.name, "Sean"), eq(users.c.name, "Tess")))

    def test_unsupported_row_type(self):
        with pytest.raises(TypeError):
            insert_into(users).values("Sean")

    def test_non_assignment_slot(self):
        with pytest.raises(TypeError):
            insert_into(users).values((eq(users.c.name, "Sean"), "Black"))

    def test_dataclass_with_unknown_field(self):
        @dataclass
        class Draft:
            title: str
            subtitle: str

        with pytest.raises(ValueError):
            insert_into(posts).values(Draft(title="a", subtitle="b"))


class TestGenerative:
    def test_values_returns_new_statement(self):
        base = insert_into(users)
        first = base.values(eq(users.c.name, "Sean"))
        second = base.values(eq(users.c.name, "Tess"))
        assert base.rows == ()
        assert compile_query(first).binds == ("Sean",)
        assert compile_query(second).binds == ("Tess",)

    def test_default_values_overrides_earlier_values(self):
        query = insert_into(users).values(eq(users.c.name, "Sean")).default_values()
        assert debug_query(query) == "INSERT INTO `users` () VALUES () -- binds: []"
        assert query.row_count == 1

    def test_custom_placeholder(self):
        query = insert_into(users).values([eq(users.c.name, "Sean"), None])
        compiled = compile_query(query, placeholder="%s")
        assert compiled.sql == "INSERT INTO `users` (`name`) VALUES (%s), (DEFAULT)"
