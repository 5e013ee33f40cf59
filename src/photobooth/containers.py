"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from photobooth.adapters.supabase_media_repository import SupabaseMediaRepository
from photobooth.config import Settings
from photobooth.services.media import MediaService
from photobooth.services.network import NetworkResolver


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    media_service: MediaService
    network_resolver: NetworkResolver
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    media_service = MediaService(SupabaseMediaRepository(supabase_client))
    network_resolver = NetworkResolver(
        network_ip=resolved_settings.network_ip,
        preferred_ip=resolved_settings.preferred_ip,
        port=resolved_settings.port,
        scheme=resolved_settings.public_scheme,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=resolved_settings,
        media_service=media_service,
        network_resolver=network_resolver,
        close_resources=close_resources,
    )
