import pytest
from conftest import auth, count_rows, fetch_profile

from beauty_directory.domain.notifications.repository import NotificationRepository
from beauty_directory.models import Message, Notification, Profile, Review, Service


def test_create_profile_binds_caller_identity(client):
    res = client.post(
        "/api/profiles",
        json={"username": "sarah_beauty", "role": "provider", "instagram": "@sarah_lashes"},
        headers=auth("user_sarah"),
    )
    assert res.status_code == 201
    body = res.json()
    assert body["userId"] == "user_sarah"
    assert body["username"] == "sarah_beauty"
    assert body["role"] == "provider"
    assert body["instagram"] == "sarah_lashes"
    assert body["rating"] == 0
    assert body["reviewCount"] == 0
    assert body["isAdmin"] is False


def test_create_profile_defaults_to_client_and_ignores_privileged_fields(client):
    res = client.post(
        "/api/profiles",
        json={"username": "jessica_c", "isAdmin": True, "rating": 5, "reviewCount": 10},
        headers=auth("user_jess"),
    )
    assert res.status_code == 201
    body = res.json()
    assert body["role"] == "client"
    assert body["isAdmin"] is False
    assert body["rating"] == 0
    assert body["reviewCount"] == 0


def test_create_profile_requires_authentication(client):
    res = client.post("/api/profiles", json={"username": "nobody"})
    assert res.status_code == 401
    assert "message" in res.json()


def test_create_profile_conflicts_on_taken_username(client, make_profile):
    make_profile("taken_name")
    res = client.post("/api/profiles", json={"username": "taken_name"}, headers=auth("user_new"))
    assert res.status_code == 409


def test_create_profile_conflicts_when_identity_already_onboarded(client, make_profile):
    make_profile("first_name", user_id="user_twice")
    res = client.post("/api/profiles", json={"username": "second_name"}, headers=auth("user_twice"))
    assert res.status_code == 409


def test_create_profile_rejects_short_username(client):
    res = client.post("/api/profiles", json={"username": "ab"}, headers=auth("user_short"))
    assert res.status_code == 422


def test_create_profile_rejects_unknown_location_type(client):
    res = client.post(
        "/api/profiles",
        json={"username": "valid_name", "locationType": "castle"},
        headers=auth("user_castle"),
    )
    assert res.status_code == 422


def test_check_username_agrees_with_create(client, make_profile):
    make_profile("Sarah_Beauty")

    res = client.post("/api/profiles/check-username", json={"username": "Sarah_Beauty"})
    assert res.json() == {"available": False}

    # Case-sensitive: a different casing is reported available and can be created
    res = client.post("/api/profiles/check-username", json={"username": "sarah_beauty"})
    assert res.json() == {"available": True}
    res = client.post("/api/profiles", json={"username": "sarah_beauty"}, headers=auth("user_other"))
    assert res.status_code == 201


def test_get_me_returns_404_before_onboarding(client):
    res = client.get("/api/profiles/me", headers=auth("user_unknown"))
    assert res.status_code == 404
    assert res.json()["message"] == "Profile not found"


def test_get_me(client, make_profile):
    profile_id = make_profile("me_myself", user_id="user_me")
    res = client.get("/api/profiles/me", headers=auth("user_me"))
    assert res.status_code == 200
    assert res.json()["id"] == profile_id


def test_update_profile_is_partial_and_protects_identity(client, make_profile):
    profile_id = make_profile("editor", user_id="user_editor", bio="old bio", location="Bondi")

    res = client.put(
        "/api/profiles/me",
        json={"bio": "new bio", "userId": "someone_else", "username": "hijack", "rating": 5},
        headers=auth("user_editor"),
    )
    assert res.status_code == 200

    profile = fetch_profile(profile_id)
    assert profile.bio == "new bio"
    assert profile.location == "Bondi"
    assert profile.user_id == "user_editor"
    assert profile.username == "editor"
    assert profile.rating == 0


def test_update_username(client, make_profile):
    profile_id = make_profile("old_name", user_id="user_rename")

    res = client.put("/api/profiles/me/username", json={"username": "new_name"}, headers=auth("user_rename"))
    assert res.status_code == 200
    assert res.json()["username"] == "new_name"

    profile = fetch_profile(profile_id)
    assert profile.username == "new_name"
    assert profile.username_changed_at is not None


def test_update_username_unchanged_is_noop(client, make_profile):
    profile_id = make_profile("same_name", user_id="user_same")
    res = client.put("/api/profiles/me/username", json={"username": "same_name"}, headers=auth("user_same"))
    assert res.status_code == 200
    assert fetch_profile(profile_id).username_changed_at is None


def test_update_username_conflict(client, make_profile):
    make_profile("holder")
    make_profile("wanter", user_id="user_wanter")
    res = client.put("/api/profiles/me/username", json={"username": "holder"}, headers=auth("user_wanter"))
    assert res.status_code == 409


def test_update_username_length_limits(client, make_profile):
    make_profile("limits", user_id="user_limits")
    res = client.put("/api/profiles/me/username", json={"username": "x" * 31}, headers=auth("user_limits"))
    assert res.status_code == 422


def test_get_profile_detail_includes_services_and_reviews(client, make_profile, make_service):
    provider_id = make_profile("detail_pro", role="provider")
    make_profile("detail_client", user_id="user_detail_client")
    make_service(provider_id, "Classic Lashes", price="80", duration=90)

    client.post(
        "/api/reviews",
        json={"providerId": provider_id, "rating": 5, "comment": "Lovely"},
        headers=auth("user_detail_client"),
    )

    res = client.get(f"/api/profiles/{provider_id}")
    assert res.status_code == 200
    body = res.json()
    assert [s["name"] for s in body["services"]] == ["Classic Lashes"]
    assert len(body["reviews"]) == 1
    assert body["reviews"][0]["comment"] == "Lovely"
    assert body["rating"] == 5.0


def test_get_profile_missing(client):
    assert client.get("/api/profiles/999").status_code == 404


def test_delete_profile_leaves_no_dependent_rows(client, make_profile, make_service, make_message):
    provider_id = make_profile("leaving_pro", role="provider", user_id="user_leaving")
    other_provider_id = make_profile("staying_pro", role="provider")
    client_id = make_profile("reviewer", user_id="user_reviewer")

    make_service(provider_id, "Brows")
    # Review received by the leaving provider
    client.post("/api/reviews", json={"providerId": provider_id, "rating": 4}, headers=auth("user_reviewer"))
    # Review written by the leaving provider about someone else
    client.post("/api/reviews", json={"providerId": other_provider_id, "rating": 2}, headers=auth("user_leaving"))
    make_message(provider_id, client_id)
    make_message(client_id, provider_id)

    res = client.delete("/api/profiles/me", headers=auth("user_leaving"))
    assert res.status_code == 204

    assert fetch_profile(provider_id) is None
    assert count_rows(Service, provider_id=provider_id) == 0
    assert count_rows(Review, provider_id=provider_id) == 0
    assert count_rows(Review, client_id=provider_id) == 0
    assert count_rows(Message, sender_id=provider_id) == 0
    assert count_rows(Message, receiver_id=provider_id) == 0
    assert count_rows(Notification, profile_id=provider_id) == 0
    assert count_rows(Profile) == 2


def test_delete_profile_recomputes_ratings_of_reviewed_providers(client, make_profile):
    provider_id = make_profile("rated_pro", role="provider")
    make_profile("kind_client", user_id="user_kind")
    make_profile("harsh_client", user_id="user_harsh")

    client.post("/api/reviews", json={"providerId": provider_id, "rating": 5}, headers=auth("user_kind"))
    client.post("/api/reviews", json={"providerId": provider_id, "rating": 1}, headers=auth("user_harsh"))
    assert fetch_profile(provider_id).rating == 3.0

    assert client.delete("/api/profiles/me", headers=auth("user_harsh")).status_code == 204

    provider = fetch_profile(provider_id)
    assert provider.rating == 5.0
    assert provider.review_count == 1


def test_failed_cascade_leaves_profile_untouched(client, make_profile, make_service, make_message, monkeypatch):
    provider_id = make_profile("halfway_pro", role="provider", user_id="user_halfway")
    client_id = make_profile("halfway_client", user_id="user_halfway_client")
    make_service(provider_id, "Nails")
    client.post("/api/reviews", json={"providerId": provider_id, "rating": 3}, headers=auth("user_halfway_client"))
    make_message(provider_id, client_id)

    def broken_delete(db, profile_id):
        raise RuntimeError("notifications table unavailable")

    monkeypatch.setattr(NotificationRepository, "delete_notifications_for_profile", staticmethod(broken_delete))

    with pytest.raises(RuntimeError):
        client.delete("/api/profiles/me", headers=auth("user_halfway"))

    assert fetch_profile(provider_id) is not None
    assert count_rows(Service, provider_id=provider_id) == 1
    assert count_rows(Review, provider_id=provider_id) == 1
    assert count_rows(Message, sender_id=provider_id) == 1
    assert count_rows(Notification, profile_id=provider_id) == 1
