"""
Users API - CRUD over the user resource with JSON/XML content negotiation
"""
import json
import uuid
from typing import Any, Optional
from xml.etree.ElementTree import Element, SubElement, tostring

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from errors import MalformedInputError
from models.user_models import UserDto
from repositories import UserRepository, get_user_repository
from services.user_resource import ResourceResponse, UserResource, wants_xml

router = APIRouter()


# --- Helper Functions ---

class RequestLinkGenerator:
    """Builds absolute links from the routes of the running app."""

    def __init__(self, request: Request):
        self.request = request

    def user_url(self, user_id: uuid.UUID) -> str:
        return str(self.request.url_for("get_user_by_id", user_id=str(user_id)))

    def users_page_url(self, page_number: int, page_size: int) -> str:
        url = self.request.url_for("get_users")
        return str(url.include_query_params(pageNumber=page_number, pageSize=page_size))


def get_user_resource(
    request: Request, repository: UserRepository = Depends(get_user_repository)
) -> UserResource:
    return UserResource(repository, RequestLinkGenerator(request))


async def read_json_body(request: Request) -> Any:
    """Decoded JSON body, or None when the body is empty"""
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError:
        raise MalformedInputError("Request body is not valid JSON")


def _user_element(dto: UserDto, tag: str = "user") -> Element:
    element = Element(tag)
    for key, value in dto.model_dump(by_alias=True, mode="json").items():
        SubElement(element, key).text = "" if value is None else str(value)
    return element


def to_xml(body: Any) -> bytes:
    if isinstance(body, list):
        root = Element("users")
        for dto in body:
            root.append(_user_element(dto))
    elif isinstance(body, UserDto):
        root = _user_element(body)
    else:
        root = Element("id")
        root.text = str(body)
    return tostring(root, encoding="utf-8", xml_declaration=True)


def render(request: Request, result: ResourceResponse) -> Response:
    if result.body is None:
        return Response(status_code=result.status_code, headers=result.headers)
    if wants_xml(request.headers.get("accept")):
        return Response(
            content=to_xml(result.body),
            status_code=result.status_code,
            headers=result.headers,
            media_type="application/xml",
        )
    return JSONResponse(
        content=jsonable_encoder(result.body),
        status_code=result.status_code,
        headers=result.headers,
    )


# --- Endpoints ---

@router.api_route("/{user_id}", methods=["GET", "HEAD"], response_model=UserDto)
async def get_user_by_id(user_id: uuid.UUID, request: Request, resource: UserResource = Depends(get_user_resource)):
    """Get a user by id. HEAD answers with headers only."""
    result = resource.get_by_id(
        user_id,
        head=request.method == "HEAD",
        accept=request.headers.get("accept"),
    )
    return render(request, result)


@router.get("")
async def get_users(
    request: Request,
    page_number: Optional[int] = Query(None, alias="pageNumber"),
    page_size: Optional[int] = Query(None, alias="pageSize"),
    resource: UserResource = Depends(get_user_resource),
):
    """List users one page at a time. Navigation data goes in the X-Pagination header."""
    return render(request, resource.get_users(page_number, page_size))


@router.post("", status_code=201)
async def create_user(request: Request, resource: UserResource = Depends(get_user_resource)):
    """Create a user. Responds with the new id and its location."""
    payload = await read_json_body(request)
    return render(request, resource.create(payload))


@router.put("/{user_id}")
async def upsert_user(user_id: uuid.UUID, request: Request, resource: UserResource = Depends(get_user_resource)):
    """Replace a user, creating it under the given id if it does not exist"""
    payload = await read_json_body(request)
    return render(request, resource.upsert(user_id, payload))


@router.patch("/{user_id}", status_code=204)
async def partially_update_user(user_id: uuid.UUID, request: Request, resource: UserResource = Depends(get_user_resource)):
    """Apply a JSON Patch document to a user"""
    document = await read_json_body(request)
    return render(request, resource.partial_update(user_id, document))


@router.delete("/{user_id}", status_code=204)
async def delete_user(user_id: uuid.UUID, request: Request, resource: UserResource = Depends(get_user_resource)):
    return render(request, resource.delete(user_id))


@router.options("")
async def get_users_options():
    result = UserResource.options()
    return Response(status_code=result.status_code, headers=result.headers)
