from fastapi import APIRouter, Depends

from agroguard.routers.v1.crud import add_crud_routes, listing, service_dependency
from agroguard.services.catalog import ChemicalService

router = APIRouter()
get_chemicals = service_dependency("chemicals")


@router.get("/type/{chemical_type}")
async def chemicals_by_type(chemical_type: str, service: ChemicalService = Depends(get_chemicals)):
    return listing(await service.get_by_type(chemical_type))


add_crud_routes(router, "chemicals", "Chemical")
