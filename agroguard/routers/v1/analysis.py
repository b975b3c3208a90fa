import base64
import binascii
import logging
import re
from typing import Optional

from fastapi import APIRouter, UploadFile, File, Form, Depends

from SharedStore.exc.base import EnumException
from agroguard.config import Settings
from agroguard.dependencies import get_settings, get_catalog, get_orchestrator
from agroguard.exceptions import AnalysisErrorCode, CatalogValidationError
from agroguard.schemas.analysis import AnalyzeBase64Request
from agroguard.services.analysis import AnalysisOrchestrator, AnalysisOutcome
from agroguard.services.catalog import Catalog

logger = logging.getLogger(__name__)

router = APIRouter()

DATA_URL_PREFIX = re.compile(r"^data:(image/[\w.+-]+);base64,", re.IGNORECASE)


def invalid_image(detail: str) -> EnumException:
    return EnumException(400, AnalysisErrorCode.INVALID_IMAGE, err_kwargs={"detail": detail})


def decode_base64_image(payload: str) -> tuple[bytes, str]:
    """Decode a bare or ``data:image/...;base64,`` prefixed payload into (bytes, mime type)"""
    mime_type = "image/jpeg"
    match = DATA_URL_PREFIX.match(payload)
    if match:
        mime_type = match.group(1).lower()
        payload = payload[match.end():]
    try:
        return base64.b64decode(payload, validate=True), mime_type
    except (binascii.Error, ValueError) as e:
        raise invalid_image("Invalid base64 image data") from e


async def respond(
    outcome: AnalysisOutcome,
    catalog: Catalog,
    user_id: Optional[str],
    image_url: Optional[str],
    location: Optional[str],
) -> dict:
    response = {"success": True, "result": outcome.result.to_document(), "provider": outcome.provider}

    if user_id and image_url and outcome.result.detected:
        try:
            submission_id = await catalog.pending.submit_from_analysis(
                outcome.result, user_id, image_url, location or ""
            )
        except CatalogValidationError as e:
            logger.warning(f"⚠️  Analysis not queued for review: {e}")
            submission_id = None
        if submission_id:
            response["submissionId"] = submission_id
    return response


@router.post("/analyze-crop")
async def analyze_crop(
    image: Optional[UploadFile] = File(None),
    user_id: Optional[str] = Form(None, alias="userId"),
    image_url: Optional[str] = Form(None, alias="imageUrl"),
    location: Optional[str] = Form(None),
    settings: Settings = Depends(get_settings),
    catalog: Catalog = Depends(get_catalog),
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    """
    Diagnose a crop photo sent as multipart field ``image``.

    With ``userId`` and ``imageUrl`` a detected disease is also queued as a
    pending submission for expert review.
    """
    if image is None:
        raise invalid_image("No image file provided")
    if not (image.content_type or "").startswith("image/"):
        raise invalid_image("Only image files are allowed")

    image_bytes = await image.read()
    if not image_bytes:
        raise invalid_image("No image file provided")
    if len(image_bytes) > settings.MAX_UPLOAD_BYTES:
        raise invalid_image("Image too large. Please use an image under 10MB.")

    logger.info(f"📸 Analyzing {image.filename} ({len(image_bytes)} bytes)")
    outcome = await orchestrator.analyze(image_bytes, mime_type=image.content_type)
    return await respond(outcome, catalog, user_id, image_url, location)


@router.post("/analyze-crop-base64")
async def analyze_crop_base64(
    body: AnalyzeBase64Request,
    settings: Settings = Depends(get_settings),
    catalog: Catalog = Depends(get_catalog),
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    if not body.image_base64:
        raise invalid_image("No image data provided")

    image_bytes, mime_type = decode_base64_image(body.image_base64.strip())
    if len(image_bytes) > settings.MAX_UPLOAD_BYTES:
        raise invalid_image("Image too large. Please use an image under 10MB.")

    outcome = await orchestrator.analyze(image_bytes, mime_type=mime_type)
    return await respond(outcome, catalog, body.user_id, body.image_url, body.location)
