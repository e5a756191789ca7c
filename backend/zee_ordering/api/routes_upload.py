from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session

from zee_ordering.config import Settings, get_settings
from zee_ordering.db import get_db
from zee_ordering.services.upload_service import (
    ProductNotFound,
    UploadService,
    UploadServiceException,
)
from zee_ordering.utils.logger import get_logger

router = APIRouter(prefix="/api/upload", tags=["upload"])
log = get_logger("api.upload")


@router.post("/image", summary="Attach an image to a product")
def upload_image(
    file: Optional[UploadFile] = File(None),
    product_id: Optional[str] = Form(None, alias="productId"),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    if file is None or not product_id:
        raise HTTPException(status_code=400, detail="Missing file or product ID")
    data = file.file.read()
    svc = UploadService(db, settings=settings)
    try:
        image_url = svc.save_product_image(product_id, file.filename, data)
    except UploadServiceException as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ProductNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        log.exception("Upload failed for product %s", product_id)
        raise HTTPException(status_code=500, detail="Upload failed")
    return {"success": True, "imageUrl": image_url}
