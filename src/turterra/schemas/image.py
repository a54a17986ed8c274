"""Schemas for species photo metadata served from the image CDN."""

from pydantic import BaseModel


class SpeciesImageMetadata(BaseModel):
    """Normalized custom metadata of one photo."""

    primary_photo: bool = False
    life_stage: str = ""
    life_stages_descriptor: str = ""
    asset_type: str = ""
    credits_basic: str = ""
    credits_full: str = ""
    author: str = ""


class SpeciesImage(BaseModel):
    """One species photo asset."""

    public_id: str
    secure_url: str
    metadata: SpeciesImageMetadata
