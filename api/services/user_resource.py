"""
User resource access layer.

Turns decoded request input into repository calls and describes the HTTP
response to send back. Nothing here knows about routing or rendering; the
router supplies a LinkGenerator and turns a ResourceResponse into a real
response.
"""
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

import logfire
from pydantic import ValidationError

from errors import MalformedInputError, UserNotFoundError, ValidationFailedError
from mapping import (
    apply_update_dto,
    create_dto_to_entity,
    entity_to_update_dto,
    entity_to_user_dto,
    put_dto_to_entity,
)
from models.user_models import CreateUserDto, PaginationHeader, PutUserDto, UpdateUserDto
from patching import apply_patch, parse_patch_document
from repositories.base import UserRepository

DEFAULT_PAGE_NUMBER = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 20

ALLOWED_METHODS = "POST, GET, OPTIONS"
XML_MEDIA_TYPE = "application/xml"


class LinkGenerator(Protocol):
    def user_url(self, user_id: uuid.UUID) -> str:
        ...

    def users_page_url(self, page_number: int, page_size: int) -> str:
        ...


@dataclass
class ResourceResponse:
    status_code: int
    body: Any = None
    headers: Dict[str, str] = field(default_factory=dict)


def wants_xml(accept: Optional[str]) -> bool:
    return XML_MEDIA_TYPE in (accept or "")


def clamp_paging(page_number: Optional[int], page_size: Optional[int]):
    page_number = DEFAULT_PAGE_NUMBER if page_number is None else page_number
    page_size = DEFAULT_PAGE_SIZE if page_size is None else page_size
    return max(page_number, 1), min(max(page_size, 1), MAX_PAGE_SIZE)


class UserResource:
    def __init__(self, repository: UserRepository, links: LinkGenerator):
        self.repository = repository
        self.links = links

    def _require(self, user_id: uuid.UUID):
        user = self.repository.find_by_id(user_id)
        if user is None:
            logfire.warn("User {user_id} not found", user_id=str(user_id))
            raise UserNotFoundError(user_id)
        return user

    def _created(self, user_id: uuid.UUID) -> ResourceResponse:
        return ResourceResponse(201, body=user_id, headers={"Location": self.links.user_url(user_id)})

    def get_by_id(self, user_id: uuid.UUID, head: bool = False, accept: Optional[str] = None) -> ResourceResponse:
        user = self._require(user_id)
        if head:
            content_type = "application/xml" if wants_xml(accept) else "application/json"
            return ResourceResponse(200, headers={"Content-Type": f"{content_type}; charset=utf-8"})
        return ResourceResponse(200, body=entity_to_user_dto(user))

    def create(self, payload: Any) -> ResourceResponse:
        if not isinstance(payload, dict):
            raise MalformedInputError("User body is required")
        try:
            dto = CreateUserDto.model_validate(payload)
        except ValidationError as e:
            raise ValidationFailedError.from_pydantic(e)

        created = self.repository.insert(create_dto_to_entity(dto))
        logfire.info("Created user {user_id} ({login})", user_id=str(created.id), login=created.login)
        return self._created(created.id)

    def get_users(self, page_number: Optional[int] = None, page_size: Optional[int] = None) -> ResourceResponse:
        page_number, page_size = clamp_paging(page_number, page_size)
        page = self.repository.get_page(page_number, page_size)

        pagination = PaginationHeader(
            previous_page_link=self.links.users_page_url(page_number - 1, page_size) if page.has_previous else None,
            next_page_link=self.links.users_page_url(page_number + 1, page_size) if page.has_next else None,
            total_count=page.total_count,
            page_size=page_size,
            current_page=page_number,
            total_pages=page.total_pages,
        )
        return ResourceResponse(
            200,
            body=[entity_to_user_dto(u) for u in page.items],
            headers={"X-Pagination": pagination.model_dump_json(by_alias=True)},
        )

    def upsert(self, user_id: uuid.UUID, payload: Any) -> ResourceResponse:
        if not isinstance(payload, dict) or user_id == uuid.UUID(int=0):
            raise MalformedInputError("User body and a non-empty id are required")
        try:
            dto = PutUserDto.model_validate(payload)
        except ValidationError as e:
            raise ValidationFailedError.from_pydantic(e)

        is_inserted = self.repository.update_or_insert(put_dto_to_entity(dto, user_id))
        if is_inserted:
            logfire.info("Inserted user {user_id} via upsert", user_id=str(user_id))
            return self._created(user_id)
        logfire.info("Replaced user {user_id}", user_id=str(user_id))
        return ResourceResponse(204)

    def partial_update(self, user_id: uuid.UUID, document: Any) -> ResourceResponse:
        if document is None:
            raise MalformedInputError("Patch document is required")
        try:
            operations = parse_patch_document(document)
        except ValidationError as e:
            raise MalformedInputError(f"Malformed patch document: {e.error_count()} error(s)")

        user = self._require(user_id)
        current = entity_to_update_dto(user).model_dump(by_alias=True)
        patched, patch_errors = apply_patch(current, operations)
        try:
            dto = UpdateUserDto.model_validate(patched)
        except ValidationError as e:
            logfire.warn("Patch for user {user_id} produced an invalid user", user_id=str(user_id))
            raise ValidationFailedError.from_pydantic(e, extra=patch_errors)
        if patch_errors:
            logfire.warn("Patch for user {user_id} could not be applied", user_id=str(user_id))
            raise ValidationFailedError(patch_errors)

        self.repository.update(apply_update_dto(dto, user))
        logfire.info("Patched user {user_id}", user_id=str(user_id))
        return ResourceResponse(204)

    def delete(self, user_id: uuid.UUID) -> ResourceResponse:
        self._require(user_id)
        self.repository.delete(user_id)
        logfire.info("Deleted user {user_id}", user_id=str(user_id))
        return ResourceResponse(204)

    @staticmethod
    def options() -> ResourceResponse:
        return ResourceResponse(200, headers={"Allow": ALLOWED_METHODS})
