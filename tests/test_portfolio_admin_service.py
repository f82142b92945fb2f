"""Portfolio item administration tests, including write compensation."""

import pytest
from fastapi import HTTPException

from core.entities import MediaUpload
from service.portfolio_admin_service import PortfolioAdminService
from service.reorder_service import ReorderService
from tests.fakes import FakeAnalyticsStore, FakeBlobStore, FakeRecordStore, run, seed_catalog
from util.enums import Kind


@pytest.fixture
def records() -> FakeRecordStore:
    store = FakeRecordStore()
    seed_catalog(store)
    return store


@pytest.fixture
def blobs() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture
def analytics() -> FakeAnalyticsStore:
    return FakeAnalyticsStore()


def _service(records, blobs, analytics, **kwargs) -> PortfolioAdminService:
    return PortfolioAdminService(
        records, blobs, analytics, ReorderService(records), bucket="media", **kwargs
    )


@pytest.fixture
def service(records, blobs, analytics) -> PortfolioAdminService:
    return _service(records, blobs, analytics)


def _video() -> MediaUpload:
    return MediaUpload(data=b"\x00\x01", filename="clip.mp4", content_type="video/mp4")


def _links(records, item_id):
    rows = records.tables.get(str(Kind.PORTFOLIO_ITEM_TAGS), {}).values()
    return sorted(r["tag_id"] for r in rows if r["portfolio_item_id"] == item_id)


def test_list_items_includes_hidden_categories(service) -> None:
    assert [i.id for i in run(service.list_items())] == ["item-1", "item-2", "item-3", "item-4"]
    assert [i.id for i in run(service.list_items("vlogs"))] == ["item-3"]


def test_create_requires_file_and_category(service) -> None:
    with pytest.raises(HTTPException) as exc:
        run(service.create_item(None, "cat-gaming"))
    assert exc.value.status_code == 422

    with pytest.raises(HTTPException):
        run(service.create_item(_video(), "  "))


def test_create_uploads_and_links_tags(service, records, blobs) -> None:
    item = run(service.create_item(_video(), "cat-vlogs", ["tag-mc", "tag-tech", "tag-mc"]))

    assert item.file_type == "video"
    assert item.order_index == 4
    assert [t.id for t in item.tags] == ["tag-mc", "tag-tech"]
    assert _links(records, item.id) == ["tag-mc", "tag-tech"]
    ((bucket, path),) = blobs.blobs.keys()
    assert bucket == "media" and path.startswith("portfolio/") and path.endswith(".mp4")


def test_create_starred_over_limit_is_refused_before_upload(records, blobs, analytics) -> None:
    service = _service(records, blobs, analytics, star_limit=1)

    with pytest.raises(HTTPException) as exc:
        run(service.create_item(_video(), "cat-gaming", is_starred=True))

    assert exc.value.status_code == 409
    assert blobs.blobs == {}


def test_create_rolls_back_item_when_tags_fail(service, records) -> None:
    records.fail_once.add("insert_many")

    with pytest.raises(HTTPException) as exc:
        run(service.create_item(_video(), "cat-vlogs", ["tag-mc"]))

    assert exc.value.status_code == 502
    assert exc.value.detail == "Error saving portfolio item. Please try again."
    assert len(records.tables[str(Kind.PORTFOLIO_ITEMS)]) == 4


def test_update_replaces_tags_exactly(service, records) -> None:
    item = run(service.update_item("item-1", "cat-vlogs", ["tag-tech"]))

    assert item.category_id == "cat-vlogs"
    assert _links(records, "item-1") == ["tag-tech"]


def test_update_restores_previous_state_when_tags_fail(service, records) -> None:
    records.fail_once.add("insert_many")

    with pytest.raises(HTTPException):
        run(service.update_item("item-1", "cat-vlogs", ["tag-tech"], upload=_video()))

    row = records.tables[str(Kind.PORTFOLIO_ITEMS)]["item-1"]
    assert row["category_id"] == "cat-gaming"
    assert row["file_type"] == "image"
    assert _links(records, "item-1") == ["tag-mc"]


def test_update_keeps_own_star_under_limit(records, blobs, analytics) -> None:
    service = _service(records, blobs, analytics, star_limit=1)

    item = run(service.update_item("item-2", "cat-gaming", [], is_starred=True))

    assert item.is_starred


def test_delete_removes_links_clicks_and_closes_gap(service, records, analytics) -> None:
    analytics.clicks["item-1"] = (5, None)

    run(service.delete_item("item-1"))

    assert _links(records, "item-1") == []
    assert "item-1" not in analytics.clicks
    assert [i.order_index for i in run(service.list_items())] == [0, 1, 2]


def test_delete_reports_success_when_reindex_fails(service, records) -> None:
    records.fail_ops = {"update"}

    run(service.delete_item("item-1"))

    assert "item-1" not in records.tables["portfolio_items"]
    assert _links(records, "item-1") == []


def test_tag_suggestions_are_fuzzy(service) -> None:
    assert [t.name for t in run(service.tag_suggestions("minecrft"))] == ["Minecraft"]


def test_presets_search_and_apply(service, records) -> None:
    records.seed(Kind.TAG_PRESETS, id="p-1", preset_name="Gaming pack", tag_ids=["tag-mc", "tag-x"])
    records.seed(Kind.TAG_PRESETS, id="p-2", preset_name="Reviews", tag_ids=["tag-tech"])

    assert [p.id for p in run(service.search_presets("GAM"))] == ["p-1"]
    assert [p.id for p in run(service.search_presets(""))] == ["p-2", "p-1"]
    assert run(service.apply_preset("p-1", ["tag-tech", "tag-mc"])) == [
        "tag-tech",
        "tag-mc",
        "tag-x",
    ]


def test_apply_unknown_preset_is_404(service) -> None:
    with pytest.raises(HTTPException) as exc:
        run(service.apply_preset("nope", []))
    assert exc.value.status_code == 404
