"""Supabase-backed media repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from photobooth.domain.media import MediaKind, PersistedMedia
from photobooth.services.media import MediaRepository

_TABLES = {MediaKind.PHOTO: "photos", MediaKind.COLLAGE: "collages"}
_COLUMNS = {
    MediaKind.PHOTO: ("id", "filename", "created_at"),
    MediaKind.COLLAGE: ("id", "title", "format", "created_at"),
}


@dataclass
class SupabaseMediaRepository(MediaRepository):
    """Supabase implementation for photo and collage persistence."""

    client: Client

    def create_photo(self, filename: str, data_url: str) -> PersistedMedia:
        """Insert a photo row and return it."""
        return self._insert(
            MediaKind.PHOTO, {"filename": filename, "data_url": data_url}
        )

    def create_collage(self, title: str, format: str, data_url: str) -> PersistedMedia:
        """Insert a collage row and return it."""
        return self._insert(
            MediaKind.COLLAGE,
            {"title": title, "format": format, "data_url": data_url},
        )

    def list_media(
        self, kind: MediaKind, limit: int, include_payload: bool
    ) -> list[PersistedMedia]:
        """Return the most recent rows, newest first."""
        columns = list(_COLUMNS[kind])
        if include_payload:
            columns.append("data_url")
        response = (
            self.client.table(_TABLES[kind])
            .select(", ".join(columns))
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_row_to_media(kind, row) for row in response.data or []]

    def get_media(self, kind: MediaKind, media_id: int) -> PersistedMedia | None:
        """Return a full row by id."""
        response = (
            self.client.table(_TABLES[kind])
            .select("*")
            .eq("id", media_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _row_to_media(kind, response.data[0])

    def delete_media(self, kind: MediaKind, media_id: int) -> bool:
        """Delete a row; PostgREST returns the deleted rows."""
        response = (
            self.client.table(_TABLES[kind]).delete().eq("id", media_id).execute()
        )
        return bool(response.data)

    def _insert(self, kind: MediaKind, payload: dict[str, object]) -> PersistedMedia:
        response = self.client.table(_TABLES[kind]).insert(payload).execute()
        if not response.data:
            raise RuntimeError(f"Failed to create {kind.value} row")
        return _row_to_media(kind, response.data[0])


def _row_to_media(kind: MediaKind, row: dict[str, object]) -> PersistedMedia:
    created = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created)
        if isinstance(created, str) and created
        else None
    )
    return PersistedMedia(
        id=int(row["id"]),
        kind=kind,
        created_at=created_at,
        data_url=row.get("data_url"),
        filename=row.get("filename"),
        title=row.get("title"),
        format=row.get("format"),
    )
