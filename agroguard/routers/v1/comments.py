from fastapi import APIRouter, Depends

from agroguard.exceptions import PersistenceError
from agroguard.routers.v1.crud import add_crud_routes, listing, not_found, service_dependency
from agroguard.schemas.catalog import ReplyRequest
from agroguard.services.catalog import CommentService

router = APIRouter()
get_comments = service_dependency("comments")


@router.get("/status/{status}")
async def comments_by_status(status: str, service: CommentService = Depends(get_comments)):
    return listing(await service.get_by_status(status))


@router.get("/category/{category}")
async def comments_by_category(category: str, service: CommentService = Depends(get_comments)):
    return listing(await service.get_by_category(category))


@router.get("/user/{user_id}")
async def comments_by_user(user_id: str, service: CommentService = Depends(get_comments)):
    return listing(await service.get_by_user(user_id))


@router.put("/{uid}/read")
async def mark_comment_read(uid: str, service: CommentService = Depends(get_comments)):
    stamped = await service.mark_as_read(uid)
    if stamped is None:
        raise not_found("Comment")
    if not stamped:
        raise PersistenceError("update", "comment")
    return {"success": True, "message": "Comment marked as read"}


@router.put("/{uid}/reply")
async def reply_to_comment(uid: str, body: ReplyRequest, service: CommentService = Depends(get_comments)):
    stamped = await service.reply(uid, body.reply, body.replied_by)
    if stamped is None:
        raise not_found("Comment")
    if not stamped:
        raise PersistenceError("update", "comment")
    return {"success": True, "message": "Reply sent successfully"}


add_crud_routes(router, "comments", "Comment")
