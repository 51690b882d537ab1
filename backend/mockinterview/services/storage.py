import io

import cloudinary.uploader
from starlette.concurrency import run_in_threadpool

from mockinterview.config.settings import logger, STORAGE_FOLDER
from mockinterview.exceptions import StorageError


class CloudinaryStorage:
    """Append-only file hosting; returns a durable URL per upload."""

    def __init__(self, cloud_name: str, api_key: str, api_secret: str, folder: str = STORAGE_FOLDER):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder

    def _upload(self, data: bytes, public_id: str, resource_type: str, fmt: str) -> dict:
        return cloudinary.uploader.upload(
            io.BytesIO(data),
            folder=self.folder,
            public_id=public_id,
            resource_type=resource_type,
            format=fmt,
            cloud_name=self.cloud_name,
            api_key=self.api_key,
            api_secret=self.api_secret,
        )

    async def upload(self, data: bytes, public_id: str, resource_type: str = "raw", fmt: str = "pdf") -> str:
        try:
            result = await run_in_threadpool(self._upload, data, public_id, resource_type, fmt)
        except Exception as ex:
            logger.error(f"Cloudinary upload failed for {public_id}: {ex!r}")
            raise StorageError("File storage upload failed", {"public_id": public_id}) from ex
        return result["secure_url"]
