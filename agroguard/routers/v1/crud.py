from typing import Any

from fastapi import APIRouter, Body, Depends

from SharedStore.exc.base import EnumException
from agroguard.dependencies import get_catalog
from agroguard.exceptions import CatalogErrorCode, PersistenceError
from agroguard.services.catalog import Catalog, CollectionService


def not_found(entity: str) -> EnumException:
    return EnumException(404, CatalogErrorCode.NOT_FOUND, err_kwargs={"entity": entity})


def listing(records: list) -> dict:
    return {"success": True, "data": records, "count": len(records)}


def service_dependency(attr: str):
    def get_service(catalog: Catalog = Depends(get_catalog)) -> CollectionService:
        return getattr(catalog, attr)

    return get_service


def add_crud_routes(router: APIRouter, attr: str, entity: str):
    """
    Register list / get / create / update / delete for one collection.

    Call this after the router's fixed paths (``/featured``, ``/status/{status}``
    and the like) so they are matched before ``/{uid}``.
    """
    get_service = service_dependency(attr)

    @router.get("")
    async def list_records(service: CollectionService = Depends(get_service)):
        return listing(await service.get_all())

    @router.get("/{uid}")
    async def get_record(uid: str, service: CollectionService = Depends(get_service)):
        record = await service.get_by_id(uid)
        if record is None:
            raise not_found(entity)
        return {"success": True, "data": record}

    @router.post("", status_code=201)
    async def create_record(
        payload: dict[str, Any] = Body(...),
        service: CollectionService = Depends(get_service),
    ):
        uid = await service.create(payload)
        if not uid:
            raise PersistenceError("create", entity.lower())

        record = await service.get_by_id(uid) or {"id": uid, **service.validate(payload)}
        return {"success": True, "data": record, "message": f"{entity} created successfully"}

    @router.put("/{uid}")
    async def update_record(
        uid: str,
        partial: dict[str, Any] = Body(...),
        service: CollectionService = Depends(get_service),
    ):
        if not await service.update(uid, partial):
            raise not_found(entity)
        return {"success": True, "message": f"{entity} updated successfully"}

    @router.delete("/{uid}")
    async def delete_record(uid: str, service: CollectionService = Depends(get_service)):
        if not await service.delete(uid):
            raise not_found(entity)
        return {"success": True, "message": f"{entity} deleted successfully"}

    return router
