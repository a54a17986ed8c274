"""Species photo metadata from the Cloudinary Admin API.

Photos live in per-species asset folders. Custom fields may be stored in the
asset's structured metadata, its context, or its ``context.custom`` map; the
three are merged with ``context.custom`` winning over ``context`` winning over
``metadata``.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from turterra.core.errors import ImageServiceError, NotFound
from turterra.core.settings import settings
from turterra.schemas.image import SpeciesImage, SpeciesImageMetadata

# Configure logger for this module
logger = logging.getLogger(__name__)

HTTP_OK = 200
HTTP_NOT_FOUND = 404


def sanitize_species_folder(species: str) -> str:
    """Turn a species name into its asset folder slug.

    ``"Blanding's Turtle"`` becomes ``"blandings-turtle"``.
    """
    slug = species.lower().replace("'", "")
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _is_primary(value: Any) -> bool:
    return value is True or value == "true"


def normalize_asset(resource: Mapping[str, Any]) -> SpeciesImage:
    """Flatten one Admin API resource into a :class:`SpeciesImage`."""
    context = resource.get("context") or {}
    context_custom = (context.get("custom") or {}) if isinstance(context, Mapping) else {}
    metadata = resource.get("metadata") or {}

    merged: dict[str, Any] = {**metadata, **context, **context_custom}

    return SpeciesImage(
        public_id=_as_text(resource.get("public_id")),
        secure_url=_as_text(resource.get("secure_url")),
        metadata=SpeciesImageMetadata(
            primary_photo=_is_primary(merged.get("primary_photo")),
            life_stage=_as_text(
                merged.get("pictured_life_stages") or merged.get("life_stage")
            ),
            life_stages_descriptor=_as_text(merged.get("life_stages_descriptor")),
            asset_type=_as_text(merged.get("asset_type")),
            credits_basic=_as_text(merged.get("credits_basic")),
            credits_full=_as_text(merged.get("credits_full")),
            author=_as_text(merged.get("author")),
        ),
    )


def primary_first(images: list[SpeciesImage]) -> list[SpeciesImage]:
    """Stable sort placing primary photos first."""
    return sorted(images, key=lambda image: not image.metadata.primary_photo)


@dataclass(frozen=True)
class CloudinaryConfig:
    """Immutable configuration for Admin API access."""

    cloud_name: str | None
    api_key: str | None
    api_secret: str | None
    base_url: str
    species_folder: str
    max_results: int
    timeout_seconds: float

    @property
    def enabled(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)


def load_cloudinary_config() -> CloudinaryConfig:
    """Build configuration object from global settings."""
    return CloudinaryConfig(
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
        base_url=settings.cloudinary_base_url,
        species_folder=settings.cloudinary_species_folder,
        max_results=settings.cloudinary_max_results,
        timeout_seconds=float(settings.cloudinary_http_timeout_seconds),
    )


class CloudinaryClient:
    """HTTP client wrapper for the Cloudinary Admin API."""

    def __init__(
        self,
        config: CloudinaryConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_cloudinary_config()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def _ensure_client(self) -> httpx.AsyncClient:
        if not self.config.enabled:
            raise ImageServiceError("Cloudinary credentials are not configured")

        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.config.base_url,
                    auth=(self.config.api_key or "", self.config.api_secret or ""),
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                    transport=self._transport,
                )
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def resources_by_asset_folder(self, folder: str) -> list[dict[str, Any]]:
        """Return raw resource records stored in ``folder``.

        Raises:
            ImageServiceError: On transport failure or an unexpected status.
        """
        client = await self._ensure_client()
        path = f"/v1_1/{self.config.cloud_name}/resources/by_asset_folder"
        params = {
            "asset_folder": folder,
            "max_results": self.config.max_results,
            "context": "true",
            "metadata": "true",
        }
        try:
            response = await client.get(path, params=params)
        except httpx.HTTPError as exc:
            logger.warning("Cloudinary request for %s failed: %s", folder, exc)
            raise ImageServiceError(f"Cloudinary request failed: {exc}") from exc

        if response.status_code == HTTP_NOT_FOUND:
            return []
        if response.status_code != HTTP_OK:
            logger.warning(
                "Cloudinary responded with %s for folder %s", response.status_code, folder
            )
            raise ImageServiceError(f"Cloudinary responded with {response.status_code}")

        payload = response.json()
        return list(payload.get("resources") or [])

    async def get_species_images(self, species: str) -> list[SpeciesImage]:
        """Return normalized photos for a species, primary photos first.

        Raises:
            NotFound: If the species folder holds no photos.
            ImageServiceError: If the CDN cannot be queried.
        """
        folder = f"{self.config.species_folder}/{sanitize_species_folder(species)}"
        resources = await self.resources_by_asset_folder(folder)
        if not resources:
            raise NotFound("No images found for this species")
        return primary_first([normalize_asset(resource) for resource in resources])


class _CloudinaryClientSingleton:
    _instance: CloudinaryClient | None = None

    @classmethod
    def get_instance(cls) -> CloudinaryClient:
        if cls._instance is None:
            cls._instance = CloudinaryClient()
        return cls._instance


def get_cloudinary_client() -> CloudinaryClient:
    """Return a singleton Cloudinary client instance."""
    return _CloudinaryClientSingleton.get_instance()
