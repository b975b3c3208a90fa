from typing import Optional

from fastapi import APIRouter, Depends

from agroguard.routers.v1.crud import add_crud_routes, listing, not_found, service_dependency
from agroguard.schemas.catalog import MarketChemicalUpdate
from agroguard.services.catalog import MarketService

router = APIRouter()
get_markets = service_dependency("markets")


@router.get("/location/{location}")
async def markets_by_location(location: str, service: MarketService = Depends(get_markets)):
    """Markets whose location or region contains ``location``"""
    return listing(await service.get_by_location(location))


@router.get("/chemical/{chemical_id}")
async def markets_with_chemical(chemical_id: str, service: MarketService = Depends(get_markets)):
    return listing(await service.get_by_chemical_availability(chemical_id))


@router.get("/{uid}/chemicals")
async def market_chemicals(uid: str, service: MarketService = Depends(get_markets)):
    chemicals = await service.get_chemicals(uid)
    if chemicals is None:
        raise not_found("Market")
    return listing(chemicals)


@router.put("/{uid}/chemicals/{chemical_id}")
async def update_market_chemical(
    uid: str,
    chemical_id: str,
    body: Optional[MarketChemicalUpdate] = None,
    service: MarketService = Depends(get_markets),
):
    body = body or MarketChemicalUpdate()
    if not await service.update_chemical(uid, chemical_id, price=body.price, available=body.available):
        raise not_found("Market or chemical")
    return {"success": True, "message": "Market chemical updated successfully"}


add_crud_routes(router, "markets", "Market")
