import pytest
from conftest import auth, count_rows, fetch_profile

from beauty_directory.domain.reviews.repository import ReviewRepository
from beauty_directory.models import Notification, Review


def _review(client, user_id, provider_id, rating, **extra):
    return client.post(
        "/api/reviews",
        json={"providerId": provider_id, "rating": rating, **extra},
        headers=auth(user_id),
    )


def test_rating_follows_reviews_through_create_and_delete(client, make_profile):
    provider_id = make_profile("provider_p", role="provider", user_id="user_p")
    make_profile("client_c", user_id="user_c")
    make_profile("client_d", user_id="user_d")

    res = _review(client, "user_c", provider_id, 4)
    assert res.status_code == 201
    review_c = res.json()["id"]
    provider = fetch_profile(provider_id)
    assert (provider.rating, provider.review_count) == (4.0, 1)

    assert _review(client, "user_d", provider_id, 2).status_code == 201
    provider = fetch_profile(provider_id)
    assert (provider.rating, provider.review_count) == (3.0, 2)

    assert client.delete(f"/api/reviews/{review_c}", headers=auth("user_c")).status_code == 204
    provider = fetch_profile(provider_id)
    assert (provider.rating, provider.review_count) == (2.0, 1)


def test_deleting_last_review_resets_rating(client, make_profile):
    provider_id = make_profile("lonely_pro", role="provider")
    make_profile("only_client", user_id="user_only")

    review_id = _review(client, "user_only", provider_id, 5).json()["id"]
    client.delete(f"/api/reviews/{review_id}", headers=auth("user_only"))

    provider = fetch_profile(provider_id)
    assert provider.rating == 0.0
    assert provider.review_count == 0


def test_mean_is_not_rounded(client, make_profile):
    provider_id = make_profile("precise_pro", role="provider")
    for name, rating in (("a_client", 5), ("b_client", 4), ("c_client", 4)):
        make_profile(name, user_id=f"user_{name}")
        _review(client, f"user_{name}", provider_id, rating)

    assert fetch_profile(provider_id).rating == 13 / 3


def test_duplicate_review_is_rejected(client, make_profile):
    provider_id = make_profile("dup_pro", role="provider")
    make_profile("dup_client", user_id="user_dup")

    assert _review(client, "user_dup", provider_id, 5).status_code == 201
    res = _review(client, "user_dup", provider_id, 1)
    assert res.status_code == 409

    assert count_rows(Review, provider_id=provider_id) == 1
    provider = fetch_profile(provider_id)
    assert (provider.rating, provider.review_count) == (5.0, 1)


def test_self_review_is_rejected(client, make_profile):
    provider_id = make_profile("vain_pro", role="provider", user_id="user_vain")
    res = _review(client, "user_vain", provider_id, 5)
    assert res.status_code == 400
    assert res.json()["field"] == "providerId"


def test_review_of_missing_or_non_provider_is_404(client, make_profile):
    make_profile("some_client", user_id="user_some")
    other_client_id = make_profile("other_client")

    assert _review(client, "user_some", 999, 5).status_code == 404
    assert _review(client, "user_some", other_client_id, 5).status_code == 404
    assert count_rows(Review) == 0


def test_rating_out_of_range_is_rejected(client, make_profile):
    provider_id = make_profile("range_pro", role="provider")
    make_profile("range_client", user_id="user_range")
    assert _review(client, "user_range", provider_id, 6).status_code == 422
    assert _review(client, "user_range", provider_id, 0).status_code == 422


def test_display_name_defaults_to_anonymous(client, make_profile):
    provider_id = make_profile("anon_pro", role="provider")
    make_profile("anon_client", user_id="user_anon")
    res = _review(client, "user_anon", provider_id, 3, displayName="   ")
    assert res.json()["displayName"] == "Anonymous"


def test_review_creates_notification_for_provider(client, make_profile):
    provider_id = make_profile("notified_pro", role="provider")
    make_profile("notifying_client", user_id="user_notifying")

    _review(client, "user_notifying", provider_id, 4, displayName="Jess")

    assert count_rows(Notification, profile_id=provider_id, type="review") == 1


def test_only_author_or_admin_can_delete(client, make_profile):
    provider_id = make_profile("guarded_pro", role="provider", user_id="user_guarded")
    make_profile("author", user_id="user_author")
    make_profile("stranger", user_id="user_stranger")
    make_profile("the_admin", user_id="user_admin", is_admin=True)

    review_id = _review(client, "user_author", provider_id, 5).json()["id"]

    assert client.delete(f"/api/reviews/{review_id}", headers=auth("user_stranger")).status_code == 403
    assert client.delete(f"/api/reviews/{review_id}", headers=auth("user_guarded")).status_code == 403
    assert client.delete(f"/api/reviews/{review_id}", headers=auth("user_admin")).status_code == 204
    assert client.delete(f"/api/reviews/{review_id}", headers=auth("user_admin")).status_code == 404


def test_check_review(client, make_profile):
    provider_id = make_profile("checked_pro", role="provider")
    make_profile("checker", user_id="user_checker")

    res = client.get(f"/api/reviews/check/{provider_id}", headers=auth("user_checker"))
    assert res.json() == {"hasReviewed": False, "reviewId": None}

    review_id = _review(client, "user_checker", provider_id, 4).json()["id"]
    res = client.get(f"/api/reviews/check/{provider_id}", headers=auth("user_checker"))
    assert res.json() == {"hasReviewed": True, "reviewId": review_id}


def test_list_reviews_newest_first(client, make_profile):
    provider_id = make_profile("listed_pro", role="provider")
    make_profile("first_client", user_id="user_first")
    make_profile("second_client", user_id="user_second")

    first = _review(client, "user_first", provider_id, 5).json()["id"]
    second = _review(client, "user_second", provider_id, 3).json()["id"]

    res = client.get("/api/reviews", params={"providerId": provider_id})
    assert [r["id"] for r in res.json()] == [second, first]


def test_failed_recompute_rolls_back_the_review(client, make_profile, monkeypatch):
    provider_id = make_profile("atomic_pro", role="provider")
    make_profile("atomic_client", user_id="user_atomic")

    def broken_recompute(db, provider_id):
        raise RuntimeError("aggregate update failed")

    monkeypatch.setattr(ReviewRepository, "recompute_provider_rating", staticmethod(broken_recompute))

    with pytest.raises(RuntimeError):
        _review(client, "user_atomic", provider_id, 5)

    assert count_rows(Review) == 0
    assert count_rows(Notification) == 0
    provider = fetch_profile(provider_id)
    assert (provider.rating, provider.review_count) == (0, 0)
