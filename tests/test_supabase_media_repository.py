"""Tests for the Supabase media repository."""

from dataclasses import dataclass, field

import pytest

from photobooth.adapters.supabase_media_repository import SupabaseMediaRepository
from photobooth.domain.media import MediaKind


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "delete": []}
    )
    last_payload: object | None = None
    last_columns: str | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_order: tuple[str, bool] | None = None
    last_limit: int | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, columns: str = "*") -> "FakeTable":
        self._action = "select"
        self.last_columns = columns
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self.last_order = (column, desc)
        return self

    def limit(self, count: int) -> "FakeTable":
        self.last_limit = count
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def test_create_photo_inserts_row() -> None:
    client = FakeSupabaseClient()
    photos = client.table("photos")
    photos.queue(
        "insert",
        [
            {
                "id": 7,
                "filename": "a.jpg",
                "data_url": "data:image/jpeg;base64,AAA=",
                "created_at": "2024-05-01T10:00:00+00:00",
            }
        ],
    )

    created = SupabaseMediaRepository(client).create_photo(
        "a.jpg", "data:image/jpeg;base64,AAA="
    )

    assert photos.last_payload == {
        "filename": "a.jpg",
        "data_url": "data:image/jpeg;base64,AAA=",
    }
    assert created.id == 7
    assert created.kind is MediaKind.PHOTO
    assert created.created_at is not None
    assert created.created_at.year == 2024


def test_create_collage_inserts_into_collages() -> None:
    client = FakeSupabaseClient()
    collages = client.table("collages")
    collages.queue(
        "insert",
        [{"id": 3, "title": "Party", "format": "strip", "created_at": None}],
    )

    created = SupabaseMediaRepository(client).create_collage(
        "Party", "strip", "data:image/jpeg;base64,AAA="
    )

    assert collages.last_payload["format"] == "strip"
    assert created.title == "Party"
    assert created.created_at is None


def test_insert_without_returned_row_raises() -> None:
    client = FakeSupabaseClient()

    with pytest.raises(RuntimeError):
        SupabaseMediaRepository(client).create_photo("a.jpg", "data:,")


def test_list_media_orders_newest_first_and_limits() -> None:
    client = FakeSupabaseClient()
    collages = client.table("collages")
    collages.queue(
        "select",
        [
            {"id": 2, "title": "B", "format": "grid", "created_at": "2024-05-02"},
            {"id": 1, "title": "A", "format": "grid", "created_at": "2024-05-01"},
        ],
    )

    rows = SupabaseMediaRepository(client).list_media(
        MediaKind.COLLAGE, limit=50, include_payload=False
    )

    assert [row.id for row in rows] == [2, 1]
    assert collages.last_order == ("created_at", True)
    assert collages.last_limit == 50
    assert collages.last_columns is not None
    assert "data_url" not in collages.last_columns


def test_list_photos_with_payload_selects_data_url() -> None:
    client = FakeSupabaseClient()
    photos = client.table("photos")

    SupabaseMediaRepository(client).list_media(
        MediaKind.PHOTO, limit=100, include_payload=True
    )

    assert photos.last_columns is not None
    assert "data_url" in photos.last_columns


def test_get_media_filters_by_id() -> None:
    client = FakeSupabaseClient()
    photos = client.table("photos")
    photos.queue("select", [{"id": 5, "filename": "x.jpg", "data_url": "data:,"}])

    repository = SupabaseMediaRepository(client)
    found = repository.get_media(MediaKind.PHOTO, 5)
    missing = repository.get_media(MediaKind.PHOTO, 6)

    assert found is not None
    assert found.data_url == "data:,"
    assert missing is None
    assert ("id", 5) in photos.last_filters


def test_delete_media_reports_whether_row_existed() -> None:
    client = FakeSupabaseClient()
    photos = client.table("photos")
    photos.queue("delete", [{"id": 5}])

    repository = SupabaseMediaRepository(client)

    assert repository.delete_media(MediaKind.PHOTO, 5) is True
    assert repository.delete_media(MediaKind.PHOTO, 5) is False
