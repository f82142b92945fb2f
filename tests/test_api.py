"""HTTP surface tests over in-memory stores."""

import pytest

from tests.fakes import seed_catalog
from util.enums import Kind

V1 = "/api/v1"


@pytest.fixture
def seeded(records):
    seed_catalog(records)
    return records


def test_portfolio_listing_and_search(client, seeded) -> None:
    listing = client.get(f"{V1}/portfolio")
    assert listing.status_code == 200
    assert [e["item"]["id"] for e in listing.json()["items"]] == ["item-2", "item-3", "item-1"]

    found = client.get(f"{V1}/portfolio", params={"q": "minecraft"})
    assert [e["item"]["id"] for e in found.json()["items"]] == ["item-1"]


def test_categories_are_visible_only(client, seeded) -> None:
    resp = client.get(f"{V1}/categories")
    assert [c["slug"] for c in resp.json()] == ["gaming", "vlogs"]


def test_neighbors_and_click(client, seeded, analytics) -> None:
    resp = client.get(f"{V1}/portfolio/item-2/neighbors")
    assert resp.json() == {"index": 0, "total": 3, "previousId": "item-1", "nextId": "item-3"}

    assert client.post(f"{V1}/portfolio/item-2/click").json() == {"clicks": 1}
    assert analytics.clicks["item-2"][0] == 1


def test_visit_and_time_estimate(client, analytics) -> None:
    assert client.post(f"{V1}/visit").json() == {"visits": 1}

    estimate = client.get(f"{V1}/time-estimate").json()
    assert estimate["timeLabel"] == "24 hours"
    assert estimate["severity"] == "fast"


def test_private_access_and_submission(client) -> None:
    assert client.post(f"{V1}/private/access", json={"password": "letmein"}).json() == {"ok": True}
    assert client.post(f"{V1}/private/access", json={"password": "nope"}).status_code == 401

    bad = client.post(f"{V1}/private/submissions", json={"name": "Sam", "email": "x", "message": "m"})
    assert bad.status_code == 422
    ok = client.post(
        f"{V1}/private/submissions",
        json={"name": "Sam", "email": "sam@example.com", "message": "Hello"},
    )
    assert ok.status_code == 201
    assert ok.json()["email"] == "sam@example.com"


def test_media_served_with_content_type(client, blobs) -> None:
    blobs.blobs[("portfolio", "portfolio/x.png")] = (b"\x89PNG", "image/png")

    resp = client.get(f"{V1}/media/portfolio/portfolio/x.png")

    assert resp.status_code == 200
    assert resp.content == b"\x89PNG"
    assert resp.headers["content-type"] == "image/png"
    assert client.get(f"{V1}/media/portfolio/missing.png").status_code == 404


def test_admin_routes_require_session(client) -> None:
    assert client.get(f"{V1}/admin/dashboard").status_code == 401
    bad = client.get(f"{V1}/admin/dashboard", headers={"Authorization": "Bearer nope"})
    assert bad.status_code == 401


def test_login_rejects_wrong_password(client) -> None:
    resp = client.post(
        f"{V1}/admin/auth/login", json={"email": "admin@example.com", "password": "wrong"}
    )
    assert resp.status_code == 401


def test_session_and_logout(client, admin_headers) -> None:
    assert client.get(f"{V1}/admin/auth/session", headers=admin_headers).json() == {
        "authenticated": True,
        "email": "admin@example.com",
    }

    assert client.post(f"{V1}/admin/auth/logout", headers=admin_headers).status_code == 204
    assert client.get(f"{V1}/admin/auth/session", headers=admin_headers).json() == {
        "authenticated": False,
        "email": None,
    }


def test_dashboard_counts(client, seeded, admin_headers) -> None:
    resp = client.get(f"{V1}/admin/dashboard", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["portfolioItems"] == 4


def test_create_item_multipart(client, seeded, admin_headers, blobs) -> None:
    resp = client.post(
        f"{V1}/admin/portfolio-items",
        headers=admin_headers,
        data={"categoryId": "cat-vlogs", "tagIds": ["tag-mc", "tag-tech"], "isStarred": "false"},
        files={"file": ("clip.mp4", b"\x00\x01\x02", "video/mp4")},
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["file_type"] == "video"
    assert [t["id"] for t in body["tags"]] == ["tag-mc", "tag-tech"]
    assert len(blobs.blobs) == 1


def test_create_item_without_file_is_422(client, seeded, admin_headers) -> None:
    resp = client.post(
        f"{V1}/admin/portfolio-items", headers=admin_headers, data={"categoryId": "cat-vlogs"}
    )
    assert resp.status_code == 422


def test_oversized_upload_is_413(client, seeded, admin_headers) -> None:
    resp = client.post(
        f"{V1}/admin/portfolio-items",
        headers=admin_headers,
        data={"categoryId": "cat-vlogs"},
        files={"file": ("big.png", b"\x00" * (1024 * 1024 + 1), "image/png")},
    )
    assert resp.status_code == 413


def test_star_toggle_route(client, seeded, admin_headers) -> None:
    resp = client.post(f"{V1}/admin/portfolio-items/item-1/star", headers=admin_headers)

    assert resp.status_code == 200
    assert resp.json()["item"]["is_starred"] is True
    assert resp.json()["starredCount"] == 2


def test_generic_content_and_reorder(client, admin_headers) -> None:
    ids = []
    for q in ("a", "b", "c"):
        resp = client.post(
            f"{V1}/admin/content/faqs", headers=admin_headers, json={"question": q, "answer": q}
        )
        assert resp.status_code == 201
        ids.append(resp.json()["id"])

    moved = client.post(
        f"{V1}/admin/faqs/reorder",
        headers=admin_headers,
        json={"movedId": ids[2], "targetId": ids[0]},
    )
    assert moved.status_code == 200
    assert [e["id"] for e in moved.json()["items"]] == [ids[2], ids[0], ids[1]]

    public = client.get(f"{V1}/faqs").json()
    assert [f["question"] for f in public] == ["c", "a", "b"]

    assert client.delete(f"{V1}/admin/content/faqs/{ids[0]}", headers=admin_headers).status_code == 204
    assert [f["order_index"] for f in client.get(f"{V1}/faqs").json()] == [0, 1]


def test_unknown_kind_is_rejected(client, admin_headers) -> None:
    resp = client.get(f"{V1}/admin/content/widgets", headers=admin_headers)
    assert resp.status_code == 422


def test_reorder_unordered_kind_is_400(client, admin_headers) -> None:
    resp = client.post(
        f"{V1}/admin/{Kind.TAG_PRESETS.value}/reorder",
        headers=admin_headers,
        json={"movedId": "a", "targetId": "b"},
    )
    assert resp.status_code == 400


def test_progress_update(client, admin_headers) -> None:
    resp = client.put(
        f"{V1}/admin/progress", headers=admin_headers, json={"thumbnailsInProgress": 20}
    )
    assert resp.status_code == 200
    assert resp.json()["severity"] == "high-demand"
    assert client.get(f"{V1}/time-estimate").json()["thumbnailsInProgress"] == 20


def test_preset_apply_route(client, seeded, admin_headers, records) -> None:
    records.seed(Kind.TAG_PRESETS, id="p-1", preset_name="Pack", tag_ids=["tag-tech"])

    resp = client.post(
        f"{V1}/admin/tag-presets/p-1/apply", headers=admin_headers, json={"tagIds": ["tag-mc"]}
    )

    assert resp.json() == {"tagIds": ["tag-mc", "tag-tech"]}
