import math
import unicodedata
import uuid
from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


@dataclass
class UserEntity:
    """Canonical in-memory representation of a user."""

    login: str
    first_name: str
    last_name: str
    id: uuid.UUID = field(default_factory=lambda: uuid.UUID(int=0))
    games_played: int = 0
    current_game_id: Optional[uuid.UUID] = None


@dataclass
class PageList:
    """One page of users plus the numbers needed to navigate around it."""

    items: List[UserEntity]
    total_count: int
    current_page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


def _check_login(value: str) -> str:
    # isdecimal, not isdigit/isalnum: superscripts and fractions are not digits
    if not all(ch.isalpha() or ch.isdecimal() for ch in value):
        raise ValueError("Login should contain only letters or digits")
    return value


def _check_name(value: str) -> str:
    # Names are rendered into XML, which cannot carry control characters or lone surrogates
    if any(unicodedata.category(ch) in ("Cc", "Cs") or ch in "\ufffe\uffff" for ch in value):
        raise ValueError("Name should not contain control characters")
    return value


class UserDto(BaseModel):
    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    id: uuid.UUID
    login: str
    full_name: str
    games_played: int = 0
    current_game_id: Optional[uuid.UUID] = None


class CreateUserDto(BaseModel):
    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    login: str = Field(min_length=1)
    first_name: str = "John"
    last_name: str = "Doe"

    @field_validator("login")
    @classmethod
    def login_is_alphanumeric(cls, value: str) -> str:
        return _check_login(value)

    @field_validator("first_name", "last_name")
    @classmethod
    def name_is_printable(cls, value: str) -> str:
        return _check_name(value)


class UpdateUserDto(BaseModel):
    """Editable fields of a user. JSON Patch documents are applied to this shape."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    login: str = Field(min_length=1)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)

    @field_validator("login")
    @classmethod
    def login_is_alphanumeric(cls, value: str) -> str:
        return _check_login(value)

    @field_validator("first_name", "last_name")
    @classmethod
    def name_is_printable(cls, value: str) -> str:
        return _check_name(value)


class PutUserDto(UpdateUserDto):
    """Body of a full replace (PUT)."""


class PaginationHeader(BaseModel):
    """Value of the X-Pagination response header."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    previous_page_link: Optional[str] = None
    next_page_link: Optional[str] = None
    total_count: int
    page_size: int
    current_page: int
    total_pages: int
