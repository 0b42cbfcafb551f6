"""Storage bucket access for client documents and CPD evidence."""

import uuid
from functools import lru_cache
from typing import Optional

from supabase import Client, create_client

from libs.common.config import get_settings
from libs.common.errors import ExternalServiceError
from libs.common.logging import get_logger

logger = get_logger(__name__)


class StorageService:
    """Thin wrapper over a Supabase storage bucket."""

    def __init__(self, bucket: Optional[str] = None):
        settings = get_settings()
        self.bucket = bucket or settings.SUPABASE_STORAGE_BUCKET
        self._client: Optional[Client] = None

    @property
    def client(self) -> Client:
        if self._client is None:
            settings = get_settings()
            self._client = create_client(
                settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY
            )
        return self._client

    @staticmethod
    def build_path(prefix: str, filename: str) -> str:
        safe_name = filename.replace("/", "_").replace("\\", "_")
        return f"{prefix}/{uuid.uuid4().hex[:12]}_{safe_name}"

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        """Upload ``data`` to ``path`` and return its public URL."""
        try:
            self.client.storage.from_(self.bucket).upload(
                path=path, file=data, file_options={"content-type": content_type}
            )
        except Exception as e:
            logger.error(f"Storage upload failed for {path}: {e}")
            raise ExternalServiceError(f"Failed to upload file: {e}") from e
        return self.client.storage.from_(self.bucket).get_public_url(path)

    async def remove(self, path: str) -> None:
        try:
            self.client.storage.from_(self.bucket).remove([path])
        except Exception as e:
            # The row is already gone; a stray object is only logged.
            logger.warning(f"Storage delete failed for {path}: {e}")


@lru_cache
def get_storage() -> StorageService:
    return StorageService()
