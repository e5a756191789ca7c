import os
import time
from typing import Optional

from sqlalchemy.orm import Session

from zee_ordering.config import Settings, settings as default_settings
from zee_ordering.repositories.product_repo import ProductRepository
from zee_ordering.utils.logger import get_logger

log = get_logger("upload")

ALLOWED_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp"}
UPLOAD_SUBDIR = "uploads"


class UploadServiceException(Exception):
    pass


class ProductNotFound(Exception):
    pass


class UploadService:
    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or default_settings
        self.repo = ProductRepository(db)

    @property
    def upload_dir(self) -> str:
        return os.path.join(self.settings.PUBLIC_DIR, UPLOAD_SUBDIR)

    def save_product_image(self, product_id: str, filename: str, data: bytes) -> str:
        """
        Write the image to ``<PUBLIC_DIR>/uploads/<id>-<epoch ms>.<ext>`` and
        point the product at it. Returns the public URL.
        """
        try:
            pid = int(str(product_id).strip())
        except (TypeError, ValueError):
            raise UploadServiceException("Invalid product ID")

        ext = os.path.splitext(filename or "")[1].lstrip(".").lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise UploadServiceException(
                f"Unsupported image type; expected one of {', '.join(sorted(ALLOWED_EXTENSIONS))}"
            )
        if not data:
            raise UploadServiceException("Uploaded file is empty")

        product = self.repo.get(pid)
        if not product:
            raise ProductNotFound("Product not found")

        stored_name = f"{pid}-{int(time.time() * 1000)}.{ext}"
        os.makedirs(self.upload_dir, exist_ok=True)
        path = os.path.join(self.upload_dir, stored_name)
        with open(path, "wb") as fh:
            fh.write(data)

        image_url = f"/{UPLOAD_SUBDIR}/{stored_name}"
        self.repo.set_image(product, image_url)
        self.db.commit()
        log.info("Stored image for product %s at %s", pid, path)
        return image_url
