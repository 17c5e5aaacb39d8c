"""
Resume storage on MinIO (S3-compatible object storage).

Object layout:
  - resumes/{uuid}.{ext}
"""

import asyncio
import io
import logging
import uuid
from pathlib import PurePosixPath

from minio import Minio

from ..config import Settings, settings as default_settings
from ..models import ResumeContentType

logger = logging.getLogger(__name__)

RESUME_PREFIX = "resumes"

CONTENT_TYPES: dict[str, ResumeContentType] = {
    "pdf": ResumeContentType.PDF,
    "doc": ResumeContentType.DOC,
    "docx": ResumeContentType.DOCX,
    "txt": ResumeContentType.TXT,
}


def file_extension(filename: str) -> str:
    return PurePosixPath(filename).suffix.lstrip(".").lower() or "bin"


def content_type_for(extension: str) -> str:
    return str(CONTENT_TYPES.get(extension.lower(), ResumeContentType.OCTET_STREAM))


class StorageService:
    """Uploads resumes and returns their public URLs."""

    def __init__(self, settings: Settings | None = None, client: Minio | None = None):
        self.settings = settings or default_settings
        self._client = client
        self._bucket_ready = False

    @property
    def client(self) -> Minio:
        if self._client is None:
            self._client = Minio(
                endpoint=self.settings.minio_endpoint,
                access_key=self.settings.minio_access_key,
                secret_key=self.settings.minio_secret_key,
                secure=self.settings.minio_secure,
            )
            logger.info(
                f"MinIO client initialized (endpoint={self.settings.minio_endpoint}, "
                f"secure={self.settings.minio_secure})"
            )
        return self._client

    @property
    def public_base_url(self) -> str:
        if self.settings.minio_public_url:
            return self.settings.minio_public_url.rstrip("/")
        scheme = "https" if self.settings.minio_secure else "http"
        return f"{scheme}://{self.settings.minio_endpoint}"

    def _ensure_bucket(self) -> None:
        if self._bucket_ready:
            return
        bucket = self.settings.minio_bucket
        if not self.client.bucket_exists(bucket):
            self.client.make_bucket(bucket)
            logger.info(f"Created MinIO bucket: {bucket}")
        self._bucket_ready = True

    def _put(self, object_name: str, data: bytes, content_type: str) -> None:
        self._ensure_bucket()
        self.client.put_object(
            self.settings.minio_bucket,
            object_name,
            io.BytesIO(data),
            length=len(data),
            content_type=content_type,
        )

    async def upload_resume(self, data: bytes, filename: str) -> str:
        """
        Store a resume under a collision-free name.

        Args:
            data: File contents
            filename: Original filename, used only for its extension

        Returns:
            Public URL of the stored object
        """
        extension = file_extension(filename)
        object_name = f"{RESUME_PREFIX}/{uuid.uuid4()}.{extension}"
        content_type = content_type_for(extension)

        # The MinIO client is synchronous
        await asyncio.to_thread(self._put, object_name, data, content_type)

        logger.info(f"Uploaded resume {filename} as {object_name} ({len(data)} bytes)")
        return f"{self.public_base_url}/{self.settings.minio_bucket}/{object_name}"
