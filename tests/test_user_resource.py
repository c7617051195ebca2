"""
Tests for the user resource layer, independent of routing and rendering.
"""
import json
import math
import uuid

import pytest

from errors import MalformedInputError, UserNotFoundError, ValidationFailedError
from models.user_models import PageList, UserDto, UserEntity
from services.user_resource import UserResource, clamp_paging


@pytest.fixture
def resource(repository, links):
    return UserResource(repository, links)


def test_get_by_id_maps_entity(resource, john):
    result = resource.get_by_id(john.id)

    assert result.status_code == 200
    assert isinstance(result.body, UserDto)
    assert result.body.id == john.id
    assert result.body.full_name == "Doe John"


def test_head_skips_body_and_sets_content_type(resource, john):
    result = resource.get_by_id(john.id, head=True, accept="application/xml")

    assert result.body is None
    assert result.headers == {"Content-Type": "application/xml; charset=utf-8"}


def test_get_by_id_missing(resource):
    with pytest.raises(UserNotFoundError) as exc_info:
        resource.get_by_id(uuid.uuid4())
    assert exc_info.value.status_code == 404


def test_create_assigns_id_from_repository(resource, repository):
    result = resource.create({"login": "johndoe375", "firstName": "John", "lastName": "Doe"})

    assert result.status_code == 201
    assert result.headers["Location"] == f"/api/users/{result.body}"
    stored = repository.find_by_id(result.body)
    assert stored.login == "johndoe375"
    assert stored.first_name == "John"


def test_create_none_is_malformed(resource):
    with pytest.raises(MalformedInputError):
        resource.create(None)


def test_create_invalid_login_reports_field(resource, repository):
    with pytest.raises(ValidationFailedError) as exc_info:
        resource.create({"login": "bad login!"})

    assert exc_info.value.status_code == 422
    assert list(exc_info.value.errors) == ["login"]
    assert repository.get_page(1, 20).total_count == 0


@pytest.mark.parametrize(
    "requested, expected",
    [
        ((None, None), (1, 10)),
        ((0, 0), (1, 1)),
        ((-1, -1), (1, 1)),
        ((3, 21), (3, 20)),
        ((2, 20), (2, 20)),
        ((5, 1), (5, 1)),
    ],
)
def test_clamp_paging(requested, expected):
    assert clamp_paging(*requested) == expected


@pytest.mark.parametrize("total_count", [0, 1, 9, 10, 11, 39, 40, 41])
@pytest.mark.parametrize("page_size", [1, 3, 10, 20])
def test_total_pages_is_ceiling(total_count, page_size):
    page = PageList(items=[], total_count=total_count, current_page=1, page_size=page_size)
    assert page.total_pages == math.ceil(total_count / page_size)


def test_get_users_last_page_has_only_previous_link(resource, repository):
    for i in range(5):
        repository.insert(UserEntity(login=f"u{i}", first_name="A", last_name="B"))

    result = resource.get_users(page_number=3, page_size=2)
    pagination = json.loads(result.headers["X-Pagination"])

    assert [u.login for u in result.body] == ["u4"]
    assert pagination == {
        "previousPageLink": "/api/users?pageNumber=2&pageSize=2",
        "nextPageLink": None,
        "totalCount": 5,
        "pageSize": 2,
        "currentPage": 3,
        "totalPages": 3,
    }


def test_upsert_inserts_then_updates(resource, repository):
    user_id = uuid.uuid4()
    body = {"login": "alice", "firstName": "Alice", "lastName": "Liddell"}

    created = resource.upsert(user_id, body)
    assert created.status_code == 201
    assert created.body == user_id

    updated = resource.upsert(user_id, dict(body, lastName="Smith"))
    assert updated.status_code == 204
    assert repository.find_by_id(user_id).last_name == "Smith"


def test_upsert_nil_id_is_malformed(resource):
    with pytest.raises(MalformedInputError):
        resource.upsert(uuid.UUID(int=0), {"login": "alice", "firstName": "A", "lastName": "L"})


def test_partial_update_revalidates_whole_dto(resource, repository):
    # Stored before the letters/digits rule; any patch must fix the login too
    legacy = repository.insert(UserEntity(login="old_login", first_name="Old", last_name="User"))

    with pytest.raises(ValidationFailedError) as exc_info:
        resource.partial_update(legacy.id, [{"op": "replace", "path": "/lastName", "value": "Timer"}])

    assert "login" in exc_info.value.errors
    assert repository.find_by_id(legacy.id).last_name == "User"


def test_partial_update_keeps_game_state(resource, repository):
    game_id = uuid.uuid4()
    user = repository.insert(UserEntity(login="gamer", first_name="G", last_name="M", games_played=7, current_game_id=game_id))

    result = resource.partial_update(user.id, [
        {"op": "replace", "path": "/login", "value": "gamer2"},
        {"op": "copy", "from": "/firstName", "path": "/lastName"},
    ])

    assert result.status_code == 204
    stored = repository.find_by_id(user.id)
    assert (stored.login, stored.first_name, stored.last_name) == ("gamer2", "G", "G")
    assert stored.games_played == 7
    assert stored.current_game_id == game_id


def test_partial_update_failed_test_operation(resource, john, repository):
    with pytest.raises(ValidationFailedError) as exc_info:
        resource.partial_update(john.id, [
            {"op": "test", "path": "/login", "value": "somebodyelse"},
            {"op": "replace", "path": "/firstName", "value": "Changed"},
        ])

    assert "/login" in exc_info.value.errors
    assert repository.find_by_id(john.id).first_name == "John"


def test_partial_update_missing_document(resource, john):
    with pytest.raises(MalformedInputError):
        resource.partial_update(john.id, None)


def test_delete(resource, john, repository):
    assert resource.delete(john.id).status_code == 204
    assert repository.find_by_id(john.id) is None

    with pytest.raises(UserNotFoundError):
        resource.delete(john.id)


def test_options():
    result = UserResource.options()
    assert result.status_code == 200
    assert result.headers == {"Allow": "POST, GET, OPTIONS"}
    assert result.body is None
