from fastapi import APIRouter, Depends

from agroguard.routers.v1.crud import add_crud_routes, listing, service_dependency
from agroguard.services.catalog import DiseaseService

router = APIRouter()
get_diseases = service_dependency("diseases")


@router.get("/featured")
async def featured_diseases(service: DiseaseService = Depends(get_diseases)):
    return listing(await service.get_featured())


@router.get("/search/{crop_type}")
async def search_diseases(crop_type: str, service: DiseaseService = Depends(get_diseases)):
    """Diseases whose crop type contains ``crop_type``, ignoring case"""
    return listing(await service.search_by_crop(crop_type))


@router.get("/category/{category_id}")
async def diseases_by_category(category_id: str, service: DiseaseService = Depends(get_diseases)):
    return listing(await service.get_by_category(category_id))


add_crud_routes(router, "diseases", "Disease")
