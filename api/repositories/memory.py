import threading
import uuid
from dataclasses import replace
from typing import Dict, Optional

from models.user_models import PageList, UserEntity


class InMemoryUserRepository:
    """Dict-backed repository. Entities are copied in and out so callers never share state."""

    def __init__(self):
        self._users: Dict[uuid.UUID, UserEntity] = {}
        self._lock = threading.Lock()

    def find_by_id(self, user_id: uuid.UUID) -> Optional[UserEntity]:
        with self._lock:
            user = self._users.get(user_id)
            return replace(user) if user else None

    def get_page(self, page_number: int, page_size: int) -> PageList:
        with self._lock:
            ordered = sorted(self._users.values(), key=lambda u: (u.login, str(u.id)))
        start = (page_number - 1) * page_size
        items = [replace(u) for u in ordered[start:start + page_size]]
        return PageList(items=items, total_count=len(ordered), current_page=page_number, page_size=page_size)

    def insert(self, user: UserEntity) -> UserEntity:
        if user.id != uuid.UUID(int=0):
            raise ValueError("Inserted user must not have an id yet")
        with self._lock:
            user_id = uuid.uuid4()
            while user_id in self._users:
                user_id = uuid.uuid4()
            stored = replace(user, id=user_id)
            self._users[user_id] = stored
            return replace(stored)

    def update(self, user: UserEntity) -> None:
        with self._lock:
            if user.id not in self._users:
                raise KeyError(user.id)
            self._users[user.id] = replace(user)

    def update_or_insert(self, user: UserEntity) -> bool:
        with self._lock:
            is_inserted = user.id not in self._users
            self._users[user.id] = replace(user)
            return is_inserted

    def delete(self, user_id: uuid.UUID) -> None:
        with self._lock:
            self._users.pop(user_id, None)
