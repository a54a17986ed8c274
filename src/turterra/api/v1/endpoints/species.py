"""Species photo endpoints backed by the image CDN."""

from fastapi import APIRouter, HTTPException, status

from turterra.schemas.image import SpeciesImage

from ..dependencies import ImageClientDep

router = APIRouter(prefix="/species", tags=["species"])


@router.get("/{species}/images", response_model=list[SpeciesImage])
async def species_images(species: str, client: ImageClientDep) -> list[SpeciesImage]:
    """Return photos of a species with the primary photo first."""
    if not species.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid species parameter",
        )
    return await client.get_species_images(species)
