import uuid
from typing import Optional, Protocol

from models.user_models import PageList, UserEntity


class UserRepository(Protocol):
    """
    Persistence interface for users. Implementations own identifier
    uniqueness and their own concurrency discipline.
    """

    def find_by_id(self, user_id: uuid.UUID) -> Optional[UserEntity]:
        ...

    def get_page(self, page_number: int, page_size: int) -> PageList:
        ...

    def insert(self, user: UserEntity) -> UserEntity:
        """Store a new user under a freshly assigned id and return it."""
        ...

    def update(self, user: UserEntity) -> None:
        ...

    def update_or_insert(self, user: UserEntity) -> bool:
        """Replace the user with the same id, or insert it. True if inserted."""
        ...

    def delete(self, user_id: uuid.UUID) -> None:
        ...
