"""Photo, collage and share endpoints."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, Response, status

from photobooth.api.models import CollageCreate, PhotoCreate
from photobooth.domain.errors import NotFound
from photobooth.domain.media import MediaDownload, MediaKind, PersistedMedia
from photobooth.qr import render_qr_png

if TYPE_CHECKING:
    from photobooth.containers import AppContainer

router = APIRouter(tags=["media"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.get("/api/photos")
async def list_photos(request: Request) -> list[dict[str, object]]:
    """Return the 100 most recent photos, newest first."""
    photos = _container(request).media_service.list_photos()
    return [_serialize_photo(photo) for photo in photos]


@router.get("/api/photos/{photo_id}")
async def get_photo(photo_id: int, request: Request) -> dict[str, object]:
    """Return a full photo record."""
    photo = _container(request).media_service.get_media(MediaKind.PHOTO, photo_id)
    return _serialize_photo(photo)


@router.post("/api/photos", status_code=status.HTTP_201_CREATED)
async def create_photo(body: PhotoCreate, request: Request) -> dict[str, object]:
    """Persist a captured photo."""
    photo = _container(request).media_service.create_photo(
        body.filename, body.data_url
    )
    return {
        "success": True,
        "id": photo.id,
        "filename": photo.filename,
        "created_at": _isoformat(photo.created_at or datetime.now(tz=UTC)),
        "message": "Photo saved successfully",
    }


@router.delete("/api/photos/{photo_id}")
async def delete_photo(photo_id: int, request: Request) -> dict[str, object]:
    _container(request).media_service.delete_media(MediaKind.PHOTO, photo_id)
    return {"success": True, "message": "Photo deleted successfully"}


@router.get("/api/photos/{photo_id}/download")
async def download_photo(photo_id: int, request: Request) -> Response:
    """Stream the stored photo as an attachment."""
    download = _container(request).media_service.download(MediaKind.PHOTO, photo_id)
    return _attachment(download)


@router.get("/api/collages")
async def list_collages(request: Request) -> list[dict[str, object]]:
    """Return the 50 most recent collages without their image payload."""
    collages = _container(request).media_service.list_collages()
    return [_serialize_collage(collage) for collage in collages]


@router.get("/api/collages/{collage_id}")
async def get_collage(collage_id: int, request: Request) -> dict[str, object]:
    collage = _container(request).media_service.get_media(
        MediaKind.COLLAGE, collage_id
    )
    return _serialize_collage(collage)


@router.post("/api/collages", status_code=status.HTTP_201_CREATED)
async def create_collage(body: CollageCreate, request: Request) -> dict[str, object]:
    """Persist a composed collage."""
    collage = _container(request).media_service.create_collage(
        body.title, body.format, body.data_url
    )
    return {
        "success": True,
        "id": collage.id,
        "title": collage.title,
        "message": "Collage saved successfully",
    }


@router.delete("/api/collages/{collage_id}")
async def delete_collage(collage_id: int, request: Request) -> dict[str, object]:
    _container(request).media_service.delete_media(MediaKind.COLLAGE, collage_id)
    return {"success": True, "message": "Collage deleted successfully"}


@router.get("/api/collages/{collage_id}/download")
async def download_collage(collage_id: int, request: Request) -> Response:
    download = _container(request).media_service.download(
        MediaKind.COLLAGE, collage_id
    )
    return _attachment(download)


@router.get("/api/photos/{photo_id}/qr")
async def photo_qr(photo_id: int, request: Request) -> Response:
    """Return a PNG QR code pointing at the photo's share link."""
    return _share_qr(_container(request), MediaKind.PHOTO, photo_id)


@router.get("/api/collages/{collage_id}/qr")
async def collage_qr(collage_id: int, request: Request) -> Response:
    return _share_qr(_container(request), MediaKind.COLLAGE, collage_id)


@router.get("/share/{kind}/{media_id}")
async def share_media(kind: str, media_id: int, request: Request) -> Response:
    """Re-serve a stored photo or collage for QR scanners."""
    try:
        media_kind = MediaKind(kind)
    except ValueError as exc:
        raise NotFound("Not found") from exc
    download = _container(request).media_service.download(media_kind, media_id)
    return _attachment(download)


def _share_qr(container: AppContainer, kind: MediaKind, media_id: int) -> Response:
    container.media_service.get_media(kind, media_id)
    base_url = container.network_resolver.base_url()
    share_url = f"{base_url}/share/{kind.value}/{media_id}"
    return Response(content=render_qr_png(share_url), media_type="image/png")


def _attachment(download: MediaDownload) -> Response:
    return Response(
        content=download.content,
        media_type=download.mime,
        headers={
            "Content-Disposition": f'attachment; filename="{download.filename}"'
        },
    )


def _serialize_photo(photo: PersistedMedia) -> dict[str, object]:
    return {
        "id": photo.id,
        "filename": photo.filename,
        "data_url": photo.data_url,
        "created_at": _isoformat(photo.created_at),
    }


def _serialize_collage(collage: PersistedMedia) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": collage.id,
        "title": collage.title,
        "format": collage.format,
        "created_at": _isoformat(collage.created_at),
    }
    if collage.data_url is not None:
        payload["data_url"] = collage.data_url
    return payload


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None
