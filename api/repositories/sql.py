import uuid
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import UserDB
from models.user_models import PageList, UserEntity


def db_user_to_entity(db_user: UserDB) -> UserEntity:
    """Convert a database row to a UserEntity"""
    return UserEntity(
        id=db_user.id,
        login=db_user.login,
        first_name=db_user.first_name,
        last_name=db_user.last_name,
        games_played=db_user.games_played or 0,
        current_game_id=db_user.current_game_id,
    )


def _copy_fields(user: UserEntity, db_user: UserDB):
    db_user.login = user.login
    db_user.first_name = user.first_name
    db_user.last_name = user.last_name
    db_user.games_played = user.games_played
    db_user.current_game_id = user.current_game_id


class SqlUserRepository:
    """UserRepository on top of a SQLAlchemy session. Each write commits."""

    def __init__(self, db: Session):
        self.db = db

    def _get(self, user_id: uuid.UUID) -> Optional[UserDB]:
        return self.db.query(UserDB).filter(UserDB.id == user_id).first()

    def find_by_id(self, user_id: uuid.UUID) -> Optional[UserEntity]:
        db_user = self._get(user_id)
        return db_user_to_entity(db_user) if db_user else None

    def get_page(self, page_number: int, page_size: int) -> PageList:
        total_count = self.db.query(UserDB).count()
        offset = (page_number - 1) * page_size
        rows = []
        # Pages past the end are empty without a query; huge offsets overflow the driver
        if offset < total_count:
            rows = (
                self.db.query(UserDB)
                .order_by(UserDB.login, UserDB.id)
                .offset(offset)
                .limit(page_size)
                .all()
            )
        return PageList(
            items=[db_user_to_entity(r) for r in rows],
            total_count=total_count,
            current_page=page_number,
            page_size=page_size,
        )

    def insert(self, user: UserEntity) -> UserEntity:
        if user.id != uuid.UUID(int=0):
            raise ValueError("Inserted user must not have an id yet")
        db_user = UserDB(id=uuid.uuid4())
        _copy_fields(user, db_user)
        self.db.add(db_user)
        self.db.commit()
        self.db.refresh(db_user)
        return db_user_to_entity(db_user)

    def update(self, user: UserEntity) -> None:
        db_user = self._get(user.id)
        if not db_user:
            raise KeyError(user.id)
        _copy_fields(user, db_user)
        self.db.commit()

    def update_or_insert(self, user: UserEntity) -> bool:
        db_user = self._get(user.id)
        if db_user is not None:
            _copy_fields(user, db_user)
            self.db.commit()
            return False

        db_user = UserDB(id=user.id)
        _copy_fields(user, db_user)
        self.db.add(db_user)
        try:
            self.db.commit()
        except IntegrityError:
            # Another session inserted the same id after the lookup
            self.db.rollback()
            self.update(user)
            return False
        return True

    def delete(self, user_id: uuid.UUID) -> None:
        db_user = self._get(user_id)
        if db_user:
            self.db.delete(db_user)
            self.db.commit()
