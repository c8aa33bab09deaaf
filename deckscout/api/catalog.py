"""
Catalog API endpoint.

Lists the decks the predictor currently knows about. An unavailable
provider yields an empty list, not an error.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from deckscout.models.deck_profile import DeckProfile
from deckscout.models.failure import ApiResponse
from deckscout.services.catalog import DeckCatalogProvider, load_catalog
from deckscout.services.fallback_catalog import get_fallback_catalog

router = APIRouter(prefix="/catalog", tags=["catalog"])


def get_catalog_provider() -> DeckCatalogProvider:
    return get_fallback_catalog()


class DeckSummaryResponse(BaseModel):
    """A catalog entry as shown to clients."""

    id: str
    name: str
    colors: list[str]
    archetype: str | None
    meta_share: float
    rank: int
    total_cards: int
    signature_cards: list[str] = Field(default_factory=list)
    key_cards: list[str] = Field(default_factory=list)
    strategy: str
    weakness: str


def deck_to_response(deck: DeckProfile) -> DeckSummaryResponse:
    archetype = deck.archetype
    return DeckSummaryResponse(
        id=deck.id,
        name=deck.name,
        colors=sorted(deck.colors or ()),
        archetype=getattr(archetype, "value", archetype),
        meta_share=deck.meta_share or 0.0,
        rank=deck.rank,
        total_cards=deck.total_cards(),
        signature_cards=[card.name for card in deck.signature_cards or ()],
        key_cards=[card.name for card in deck.key_cards or ()],
        strategy=deck.strategy,
        weakness=deck.weakness,
    )


@router.get("", response_model=ApiResponse[list[DeckSummaryResponse]])
async def list_decks(
    provider: Annotated[DeckCatalogProvider, Depends(get_catalog_provider)],
) -> ApiResponse[list[DeckSummaryResponse]]:
    """List known decks, most played first."""
    decks = await load_catalog(provider)
    decks.sort(key=lambda deck: deck.meta_share or 0.0, reverse=True)
    return ApiResponse.success([deck_to_response(deck) for deck in decks])
