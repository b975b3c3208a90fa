from fastapi import APIRouter, Depends

from agroguard.routers.v1.crud import add_crud_routes, listing, service_dependency
from agroguard.services.catalog import DiseaseCategoryService

router = APIRouter()
get_categories = service_dependency("categories")


@router.get("/{uid}/diseases")
async def category_diseases(uid: str, service: DiseaseCategoryService = Depends(get_categories)):
    return listing(await service.get_diseases(uid))


add_crud_routes(router, "categories", "Disease category")
