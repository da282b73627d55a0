from conftest import make_draft
from profile_directory.directory.details import NotFound, get_by_id
from profile_directory.directory.form import ProfileForm
from profile_directory.directory.views import (
    EMPTY_LIST_MESSAGE,
    image_url,
    render_admin_panel,
    render_details,
    render_form,
    render_profile_list,
)


def test_empty_list_view_shows_no_profiles_message():
    view = render_profile_list([], "")
    assert view["empty"] is True
    assert view["rows"] == []
    assert view["message"] == EMPTY_LIST_MESSAGE


def test_list_rows_are_numbered_and_highlighted(store):
    store.add(make_draft(name="Ann", address="Paris"))
    store.add(make_draft(name="Bob", address="Annecy", email="bob@ann.org"))
    store.add(make_draft(name="Carl", address="Rome"))

    view = render_profile_list(store.list(), "ann")
    assert view["count"] == 2
    assert view["total"] == 3
    assert [row["index"] for row in view["rows"]] == [1, 2]
    first, second = view["rows"]
    assert first["name"] == [{"text": "Ann", "matched": True}]
    assert second["address"][0] == {"text": "Ann", "matched": True}
    assert {"text": "ann", "matched": True} in second["email"]
    assert first["links"]["details"] == f"/v1/profiles/{first['id']}"


def test_admin_panel_adds_actions(store):
    profile = store.add(make_draft())
    view = render_admin_panel(store.list())
    assert view["view"] == "admin_panel"
    actions = view["rows"][0]["actions"]
    assert actions["edit"] == f"/v1/admin/profiles/{profile.id}/edit"
    assert actions["delete"].endswith("confirm=true")
    assert actions["summary"] == f"/v1/profiles/{profile.id}/map"


def test_image_urls():
    assert image_url("") is None
    assert image_url("media:abc.png") == "/v1/images/media%3Aabc.png"
    assert image_url("pending:123") == "/v1/images/pending%3A123"
    assert image_url("https://cdn.test/a.png") == "https://cdn.test/a.png"


def test_form_view_modes(store):
    assert render_form(ProfileForm())["title"] == "Add Profile"
    profile = store.add(make_draft())
    view = render_form(ProfileForm(profile), {"email": "bad"})
    assert view["mode"] == "update"
    assert view["profile_id"] == profile.id
    assert view["fields"]["name"] == "Ann"
    assert "imageFile" in view["fields"]
    assert view["errors"] == {"email": "bad"}


def test_get_by_id_missing_profile(store):
    store.add(make_draft())
    result = get_by_id(store, 999)
    assert isinstance(result, NotFound)
    view = render_details(result)
    assert view["found"] is False
    assert view["error"] == "Profile not found"


def test_get_by_id_on_empty_store_adds_hint(store):
    result = get_by_id(store, 999)
    assert isinstance(result, NotFound)
    assert result.store_empty
    view = render_details(result)
    assert view["error"] == "Profile not found"
    assert view["hint"] == "No profiles found in storage"


def test_get_by_id_accepts_route_strings(store):
    profile = store.add(make_draft())
    assert get_by_id(store, str(profile.id)) == profile
    assert isinstance(get_by_id(store, "abc"), NotFound)
    assert isinstance(get_by_id(store, None), NotFound)


def test_details_view_summary(store):
    profile = store.add(make_draft(phone="555 0101", interests="chess"))
    view = render_details(get_by_id(store, profile.id))
    assert view["found"] is True
    assert view["profile"]["phone"] == "555 0101"
    assert view["profile"]["interests"] == "chess"
    assert view["profile"]["image"] is None
