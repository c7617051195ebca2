"""
Field-by-field conversions between the user entity and its wire DTOs.
"""
import uuid

from models.user_models import (
    CreateUserDto,
    PutUserDto,
    UpdateUserDto,
    UserDto,
    UserEntity,
)


def entity_to_user_dto(entity: UserEntity) -> UserDto:
    return UserDto(
        id=entity.id,
        login=entity.login,
        full_name=f"{entity.last_name} {entity.first_name}",
        games_played=entity.games_played,
        current_game_id=entity.current_game_id,
    )


def create_dto_to_entity(dto: CreateUserDto) -> UserEntity:
    """New entity with an empty id; the repository assigns the real one on insert."""
    return UserEntity(
        login=dto.login,
        first_name=dto.first_name,
        last_name=dto.last_name,
    )


def put_dto_to_entity(dto: PutUserDto, user_id: uuid.UUID) -> UserEntity:
    return UserEntity(
        id=user_id,
        login=dto.login,
        first_name=dto.first_name,
        last_name=dto.last_name,
    )


def entity_to_update_dto(entity: UserEntity) -> UpdateUserDto:
    # model_construct skips validation: a stored user may predate current rules
    return UpdateUserDto.model_construct(
        login=entity.login,
        first_name=entity.first_name,
        last_name=entity.last_name,
    )


def apply_update_dto(dto: UpdateUserDto, entity: UserEntity) -> UserEntity:
    """Copy editable fields onto an existing entity, keeping id and game state."""
    entity.login = dto.login
    entity.first_name = dto.first_name
    entity.last_name = dto.last_name
    return entity
