"""
User repositories.

`get_user_repository` is the FastAPI dependency; the backend is chosen by
the USER_REPOSITORY environment variable ("sql" or "memory").
"""
import os
from typing import Generator

from database import SessionLocal
from repositories.base import UserRepository
from repositories.memory import InMemoryUserRepository
from repositories.sql import SqlUserRepository

USER_REPOSITORY = os.getenv("USER_REPOSITORY", "sql").lower()

# Shared by all requests when the memory backend is active
memory_repository = InMemoryUserRepository()


def get_user_repository() -> Generator[UserRepository, None, None]:
    if USER_REPOSITORY == "memory":
        yield memory_repository
        return

    db = SessionLocal()
    try:
        yield SqlUserRepository(db)
    finally:
        db.close()


__all__ = [
    "UserRepository",
    "InMemoryUserRepository",
    "SqlUserRepository",
    "get_user_repository",
    "memory_repository",
    "USER_REPOSITORY",
]
