"""
OCR routes for receipt scanning.
"""
from fastapi import APIRouter, Depends, UploadFile, File
from app.core.config import settings
from app.core.exceptions import ValidationError
from app.schemas.expense import OCRReceiptPreview
from app.schemas.user import CurrentUser
from app.api.dependencies import get_current_user
from app.services import ocr_service

router = APIRouter(prefix="/ocr", tags=["ocr"])


@router.post("/parse", response_model=OCRReceiptPreview)
async def parse_receipt(
    file: UploadFile = File(...),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Upload a receipt image and get provisional expense fields back."""
    if file.content_type not in settings.ALLOWED_IMAGE_TYPES:
        raise ValidationError("Invalid file type. Only JPEG and PNG are supported.")

    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise ValidationError("File too large")
    if not content:
        raise ValidationError("Empty file")

    return await ocr_service.scan_receipt(content, file.filename or "receipt")
