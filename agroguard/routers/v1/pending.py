from typing import Optional

from fastapi import APIRouter, Depends

from agroguard.exceptions import PersistenceError
from agroguard.routers.v1.crud import add_crud_routes, listing, not_found, service_dependency
from agroguard.schemas.catalog import ApproveRequest, RejectRequest
from agroguard.services.catalog import PendingSubmissionService

router = APIRouter()
get_pending = service_dependency("pending")


@router.get("/status/{status}")
async def submissions_by_status(status: str, service: PendingSubmissionService = Depends(get_pending)):
    return listing(await service.get_by_status(status))


@router.get("/user/{user_id}")
async def submissions_by_user(user_id: str, service: PendingSubmissionService = Depends(get_pending)):
    return listing(await service.get_by_user(user_id))


@router.put("/{uid}/approve")
async def approve_submission(
    uid: str,
    body: Optional[ApproveRequest] = None,
    service: PendingSubmissionService = Depends(get_pending),
):
    """
    Promote a pending submission to a Disease.
    Uses ``diseaseData`` when given, otherwise a disease built from the submission.
    """
    disease_id = await service.approve(uid, body.disease_data if body else None)
    if disease_id is None:
        raise not_found("Pending disease")
    return {"success": True, "message": "Disease approved and added to database", "diseaseId": disease_id}


@router.put("/{uid}/reject")
async def reject_submission(
    uid: str,
    body: Optional[RejectRequest] = None,
    service: PendingSubmissionService = Depends(get_pending),
):
    stamped = await service.reject(uid, body.reason if body else None)
    if stamped is None:
        raise not_found("Pending disease")
    if not stamped:
        raise PersistenceError("reject", "pending disease")
    return {"success": True, "message": "Disease rejected successfully"}


add_crud_routes(router, "pending", "Pending disease")
