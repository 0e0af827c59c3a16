"""
Uploads API - photo upload and image serving.
"""
from typing import Optional
import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import Response

from ..errors import UploadRejectedError
from .state import AppState, get_state

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["uploads"])


@router.post("/uploads")
async def upload_files(
    files: Optional[list[UploadFile]] = File(None),
    state: AppState = Depends(get_state),
):
    """Store 2-10 customer photos and return their keys."""
    batch = []
    for upload in files or []:
        data = await upload.read()
        batch.append((upload.filename or 'upload', upload.content_type or '', data))

    try:
        records = state.uploads.save_batch(batch)
    except UploadRejectedError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OSError:
        logger.exception("Upload failed")
        raise HTTPException(status_code=500, detail="Upload failed. Please try again.")

    return {
        "success": True,
        "uploads": [r.__dict__ for r in records],
    }


@router.get("/images/{key:path}")
async def get_image(key: str, state: AppState = Depends(get_state)):
    """Serve a stored photo."""
    found = state.uploads.open(key) if key else None
    if not found:
        raise HTTPException(status_code=404, detail="Not found")

    data, content_type = found
    return Response(
        content=data,
        media_type=content_type,
        headers={
            "Cache-Control": "public, max-age=31536000, immutable",
            "X-Content-Type-Options": "nosniff",
        },
    )
