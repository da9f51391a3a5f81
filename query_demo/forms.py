"""JSON forms that deserialize into insertable rows."""

from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError

from .exceptions import DeserializeError


class UserForm(BaseModel):
    """Insertable shape of a user.

    ``hair_color`` may be omitted or null; both insert the column default.
    """

    name: str
    hair_color: str | None = None

    def as_row(self) -> dict[str, Any]:
        return self.model_dump()


_user_form_list = TypeAdapter(list[UserForm])


def parse_user_form(text: str | bytes) -> UserForm:
    try:
        return UserForm.model_validate_json(text)
    except ValidationError as e:
        raise DeserializeError(f"Invalid user form: {e}", errors=e.errors()) from e


def parse_user_forms(text: str | bytes) -> list[UserForm]:
    try:
        return _user_form_list.validate_json(text)
    except ValidationError as e:
        raise DeserializeError(f"Invalid user form list: {e}", errors=e.errors()) from e


def parse_user_json(text: str | bytes) -> UserForm | list[UserForm]:
    """Parse either a single JSON object or an array of objects."""
    stripped = text.lstrip()
    is_array = stripped.startswith(b"[") if isinstance(stripped, bytes) else stripped.startswith("[")
    return parse_user_forms(text) if is_array else parse_user_form(text)
