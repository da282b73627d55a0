"""Pure render functions turning directory state into view models."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Union
from urllib.parse import quote

from profile_directory.directory.details import STORE_EMPTY, NotFound
from profile_directory.directory.form import ProfileForm
from profile_directory.directory.images import (
    DURABLE_PREFIX,
    Durable,
    PendingLocalBytes,
    Unset,
    parse_reference,
)
from profile_directory.directory.models import Profile
from profile_directory.directory.search import filter_profiles, highlight
from profile_directory.geo.map_view import MapState

EMPTY_LIST_MESSAGE = "No profiles to show."
EMPTY_LIST_HINT = "You can create one from the admin panel."


def image_url(reference: str) -> Optional[str]:
    """Where a client can fetch the image behind a stored reference."""
    parsed = parse_reference(reference)
    if isinstance(parsed, Unset):
        return None
    if isinstance(parsed, PendingLocalBytes) or (
        isinstance(parsed, Durable) and parsed.reference.startswith(DURABLE_PREFIX)
    ):
        return f"/v1/images/{quote(reference, safe='')}"
    return reference


def profile_links(profile: Profile) -> Dict[str, str]:
    return {
        "details": f"/v1/profiles/{profile.id}",
        "map": f"/v1/profiles/{profile.id}/map",
    }


def _segments(text: str, query: str) -> List[Dict[str, Any]]:
    return [segment.to_dict() for segment in highlight(text, query)]


def _row(index: int, profile: Profile, query: str) -> Dict[str, Any]:
    return {
        "index": index,
        "id": profile.id,
        "image": image_url(profile.image),
        "name": _segments(profile.name, query),
        "email": _segments(profile.email, query),
        "address": _segments(profile.address, query),
        "description": profile.description,
        "links": profile_links(profile),
    }


def render_profile_list(profiles: Sequence[Profile], query: str = "") -> Dict[str, Any]:
    rows = [
        _row(index, profile, query)
        for index, profile in enumerate(filter_profiles(profiles, query), start=1)
    ]
    view: Dict[str, Any] = {
        "view": "profile_list",
        "query": query,
        "count": len(rows),
        "total": len(profiles),
        "empty": not rows,
        "rows": rows,
        "admin_url": "/v1/admin/profiles",
    }
    if not rows:
        view["message"] = EMPTY_LIST_MESSAGE
        view["hint"] = EMPTY_LIST_HINT
    return view


def render_admin_panel(profiles: Sequence[Profile], query: str = "") -> Dict[str, Any]:
    view = render_profile_list(profiles, query)
    view["view"] = "admin_panel"
    view["create_url"] = "/v1/admin/profiles/new"
    view.pop("hint", None)
    for row in view["rows"]:
        admin_url = f"/v1/admin/profiles/{row['id']}"
        row["actions"] = {
            "view": row["links"]["details"],
            "edit": f"{admin_url}/edit",
            "delete": f"{admin_url}?confirm=true",
            "summary": row["links"]["map"],
        }
    return view


def render_form(
    form: ProfileForm, errors: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    draft = form.draft
    return {
        "view": "profile_form",
        "mode": "update" if form.is_edit else "create",
        "title": form.title,
        "submit_label": form.title,
        "profile_id": form.profile.id if form.profile else None,
        "fields": draft.model_dump(by_alias=True),
        "image_preview": image_url(draft.image),
        "errors": dict(errors or {}),
    }


def render_details(result: Union[Profile, NotFound]) -> Dict[str, Any]:
    if isinstance(result, NotFound):
        view: Dict[str, Any] = {
            "view": "profile_details",
            "found": False,
            "error": result.message,
        }
        if result.store_empty:
            view["hint"] = STORE_EMPTY
        return view
    return {
        "view": "profile_details",
        "found": True,
        "profile": {
            "id": result.id,
            "name": result.name,
            "email": result.email,
            "phone": result.phone,
            "address": result.address,
            "description": result.description,
            "interests": result.interests,
            "image": image_url(result.image),
        },
        "links": profile_links(result),
    }


def render_map(state: MapState) -> Dict[str, Any]:
    marker = None
    if state.marker is not None:
        marker = {"lat": state.marker.lat, "lon": state.marker.lon}
    return {
        "view": "map",
        "profile_id": state.profile_id,
        "title": state.title,
        "address": state.address,
        "status": state.status,
        "message": state.message,
        "center": {"lat": state.center.lat, "lon": state.center.lon},
        "zoom": state.zoom,
        "tiles": {
            "url_template": state.tile_url_template,
            "max_zoom": state.max_zoom,
        },
        "marker": marker,
    }
