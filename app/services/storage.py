# File: app/services/storage.py

"""
Local filesystem storage for uploaded product images.

Files live under ``<root>/<folder>/<uuid><ext>`` and are served by the
StaticFiles mount at ``base_url``; the URL is what gets persisted.
"""

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from app.core.config import settings
from app.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageUpload:
    filename: str
    content_type: str
    data: bytes


class ImageStorage:
    def __init__(
        self,
        root: Path | str,
        base_url: str,
        *,
        max_bytes: int,
        allowed_types: dict[str, str],
    ):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")
        self.max_bytes = max_bytes
        self.allowed_types = allowed_types

    def validate(self, upload: ImageUpload) -> List[str]:
        problems = []
        if upload.content_type not in self.allowed_types:
            allowed = ", ".join(sorted(ext.lstrip(".") for ext in self.allowed_types.values()))
            problems.append(f"The image must be a file of type: {allowed}.")
        if len(upload.data) > self.max_bytes:
            problems.append(f"The image may not be greater than {self.max_bytes // 1024} kilobytes.")
        if not upload.data:
            problems.append("The image failed to upload.")
        return problems

    def store(self, upload: ImageUpload, folder: str = "products") -> str:
        problems = self.validate(upload)
        if problems:
            raise ValidationError(errors={"image": problems})

        name = f"{uuid.uuid4().hex}{self.allowed_types[upload.content_type]}"
        target = self.root / folder / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(upload.data)

        logger.info("Stored image %s (%d bytes)", target, len(upload.data))
        return f"{self.base_url}/{folder}/{name}"

    def path_for(self, url: Optional[str]) -> Optional[Path]:
        """Map a stored URL back to its file, refusing anything outside ``root``."""
        prefix = f"{self.base_url}/"
        if not url or not url.startswith(prefix):
            return None
        root = self.root.resolve()
        path = (root / url[len(prefix):]).resolve()
        if root not in path.parents:
            return None
        return path

    def exists(self, url: Optional[str]) -> bool:
        path = self.path_for(url)
        return path is not None and path.is_file()

    def delete(self, url: Optional[str]) -> bool:
        path = self.path_for(url)
        if path is None or not path.is_file():
            return False
        path.unlink()
        logger.info("Deleted image %s", path)
        return True


def default_storage() -> ImageStorage:
    return ImageStorage(
        settings.storage_dir,
        settings.storage_url,
        max_bytes=settings.max_image_bytes,
        allowed_types=settings.allowed_image_types,
    )
