"""HTTP route handlers for the profile directory API."""

from __future__ import annotations

import logging
from typing import Any, Dict, Type

import orjson
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from profile_directory.api.dependencies import DirectoryServices, get_services
from profile_directory.directory.details import NotFound, get_by_id
from profile_directory.directory.form import ProfileForm
from profile_directory.directory.images import (
    format_reference,
    is_image_type,
    parse_reference,
)
from profile_directory.directory.views import (
    image_url,
    render_admin_panel,
    render_details,
    render_form,
    render_map,
    render_profile_list,
)
from profile_directory.errors import FormValidationError
from profile_directory.geo.map_view import MapView

from .schemas import ImageUploadResponseModel, ProfileModel, ProfilePayloadModel

logger = logging.getLogger(__name__)

router = APIRouter()


def _payload_too_large(limit: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        detail={"error": "payload_too_large", "limit_bytes": limit},
    )


async def _read_body(http_request: Request, limit: int) -> bytes:
    header_length = http_request.headers.get("content-length")
    if header_length:
        try:
            content_length = int(header_length)
        except ValueError:
            content_length = None
        if content_length is not None and content_length > limit:
            raise _payload_too_large(limit)

    body_bytes = await http_request.body()
    if len(body_bytes) > limit:
        raise _payload_too_large(limit)
    return body_bytes


async def _load_request_model(
    http_request: Request, model_cls: Type[BaseModel], limit: int
) -> BaseModel:
    body_bytes = await _read_body(http_request, limit)
    if not body_bytes:
        data: Dict[str, Any] = {}
    else:
        try:
            data = orjson.loads(body_bytes)
        except orjson.JSONDecodeError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"error": "invalid_json", "details": str(exc)},
            ) from exc

    try:
        return model_cls.model_validate(data)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc


async def load_profile_payload(
    http_request: Request,
    services: DirectoryServices = Depends(get_services),
) -> ProfilePayloadModel:
    return await _load_request_model(
        http_request, ProfilePayloadModel, services.settings.max_payload_bytes
    )


def _not_found(result: NotFound) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": "not_found", **render_details(result)},
    )


def _submit(form: ProfileForm, services: DirectoryServices, success_status: int):
    try:
        profile = form.submit(services.store)
    except FormValidationError as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "validation_error",
                "details": exc.errors,
                "form": render_form(form, exc.errors),
            },
        )
    return JSONResponse(
        status_code=success_status,
        content=ProfileModel.from_domain(profile).model_dump(),
    )


# Public views


@router.get("/v1/profiles", tags=["profiles"])
async def list_profiles(
    q: str = Query(default="", description="Substring matched against name or address"),
    services: DirectoryServices = Depends(get_services),
) -> Dict[str, Any]:
    return render_profile_list(services.store.list(), q)


@router.get("/v1/profiles/{profile_id}", tags=["profiles"])
async def profile_details(
    profile_id: str, services: DirectoryServices = Depends(get_services)
):
    result = get_by_id(services.store, profile_id)
    if isinstance(result, NotFound):
        return _not_found(result)
    return render_details(result)


@router.get("/v1/profiles/{profile_id}/map", tags=["profiles"])
async def profile_map(
    profile_id: str, services: DirectoryServices = Depends(get_services)
):
    result = get_by_id(services.store, profile_id)
    if isinstance(result, NotFound):
        return _not_found(result)

    map_view = MapView(services.geocoder, services.settings)
    state = await map_view.show(result)
    if state is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"error": "map_closed", "details": "Map view closed before loading."},
        )
    view = render_map(state)
    map_view.close()
    return view


# Admin views


@router.get("/v1/admin/profiles", tags=["admin"])
async def admin_panel(
    q: str = Query(default=""),
    services: DirectoryServices = Depends(get_services),
) -> Dict[str, Any]:
    return render_admin_panel(services.store.list(), q)


@router.get("/v1/admin/profiles/new", tags=["admin"])
async def new_profile_form(
    services: DirectoryServices = Depends(get_services),
) -> Dict[str, Any]:
    return render_form(ProfileForm(images=services.images))


@router.get("/v1/admin/profiles/{profile_id}/edit", tags=["admin"])
async def edit_profile_form(
    profile_id: str, services: DirectoryServices = Depends(get_services)
):
    result = get_by_id(services.store, profile_id)
    if isinstance(result, NotFound):
        return _not_found(result)
    return render_form(ProfileForm(result, images=services.images))


@router.post("/v1/admin/profiles", tags=["admin"])
async def create_profile(
    payload: ProfilePayloadModel = Depends(load_profile_payload),
    services: DirectoryServices = Depends(get_services),
):
    form = ProfileForm(images=services.images)
    form.update_fields(payload.provided_fields())
    return _submit(form, services, status.HTTP_201_CREATED)


@router.put("/v1/admin/profiles/{profile_id}", tags=["admin"])
async def update_profile(
    profile_id: str,
    payload: ProfilePayloadModel = Depends(load_profile_payload),
    services: DirectoryServices = Depends(get_services),
):
    result = get_by_id(services.store, profile_id)
    if isinstance(result, NotFound):
        return _not_found(result)
    form = ProfileForm(result, images=services.images)
    form.update_fields(payload.provided_fields())
    return _submit(form, services, status.HTTP_200_OK)


@router.delete("/v1/admin/profiles/{profile_id}", tags=["admin"])
async def delete_profile(
    profile_id: str,
    confirm: bool = Query(default=False, description="Explicit user confirmation"),
    services: DirectoryServices = Depends(get_services),
) -> Response:
    if not confirm:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "error": "confirmation_required",
                "details": "Are you sure you want to delete this profile? Repeat with confirm=true.",
            },
        )
    try:
        wanted = int(profile_id)
    except ValueError:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    services.store.remove(wanted)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Images


@router.post(
    "/v1/images",
    tags=["images"],
    status_code=status.HTTP_201_CREATED,
    response_model=ImageUploadResponseModel,
)
async def upload_image(
    http_request: Request, services: DirectoryServices = Depends(get_services)
) -> ImageUploadResponseModel:
    content_type = http_request.headers.get("content-type", "")
    if not is_image_type(content_type):
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail={
                "error": "unsupported_media_type",
                "details": "Upload raw image bytes with an image/* content type.",
            },
        )
    data = await _read_body(http_request, services.settings.max_image_bytes)
    if not data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "empty_upload", "details": "No image bytes received."},
        )

    pending = services.images.stage(data, content_type)
    reference = format_reference(pending)
    return ImageUploadResponseModel(
        reference=reference,
        url=image_url(reference) or "",
        content_type=content_type.split(";", 1)[0].strip().lower(),
        size_bytes=len(data),
    )


@router.get("/v1/images/{reference:path}", tags=["images"])
async def get_image(
    reference: str, services: DirectoryServices = Depends(get_services)
) -> Response:
    data, content_type = services.images.load(parse_reference(reference))
    return Response(content=data, media_type=content_type)

