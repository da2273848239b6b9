import asyncio
from typing import AsyncIterator, Iterable, Optional, Tuple

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from filevault.configs.settings import settings
from filevault.utils import get_logger

logger = get_logger(__name__)

DOWNLOAD_CHUNK_SIZE = 64 * 1024


def _build_client():
    """S3 client pointed at the MinIO endpoint"""
    return boto3.client(
        "s3",
        endpoint_url=settings.MINIO_URL or None,
        aws_access_key_id=settings.MINIO_ACCESS_KEY or None,
        aws_secret_access_key=settings.MINIO_SECRET_KEY or None,
        region_name=settings.MINIO_REGION,
        use_ssl=settings.MINIO_SSL,
        config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
    )


class ObjectStore:
    """Byte storage for file content.

    Wraps the blocking S3 SDK in worker threads. Failures are raised to the caller,
    which decides how they map onto API errors.
    """

    def __init__(self, client=None, bucket: Optional[str] = None):
        self.client = client or _build_client()
        self.bucket = bucket or settings.MINIO_BUCKET

    def _location(self, key: str) -> str:
        base = (settings.MINIO_URL or "").rstrip("/")
        return f"{base}/{self.bucket}/{key}"

    async def ensure_bucket(self) -> bool:
        """Create the bucket when missing"""
        try:
            await asyncio.to_thread(self.client.head_bucket, Bucket=self.bucket)
            return False
        except ClientError:
            await asyncio.to_thread(self.client.create_bucket, Bucket=self.bucket)
            logger.info(f"Created bucket {self.bucket}")
            return True

    async def put(self, key: str, data: bytes, content_type: Optional[str] = None) -> dict:
        """Store an object in a single request"""
        params = {"Bucket": self.bucket, "Key": key, "Body": data}
        if content_type:
            params["ContentType"] = content_type
        await asyncio.to_thread(self.client.put_object, **params)
        return {"key": key, "location": self._location(key)}

    async def get_stream(self, key: str, chunk_size: int = DOWNLOAD_CHUNK_SIZE) -> AsyncIterator[bytes]:
        """Open an object for reading, the returned iterator yields its bytes"""
        response = await asyncio.to_thread(self.client.get_object, Bucket=self.bucket, Key=key)
        return self._iter_body(response["Body"], chunk_size)

    @staticmethod
    async def _iter_body(body, chunk_size: int) -> AsyncIterator[bytes]:
        try:
            while True:
                chunk = await asyncio.to_thread(body.read, chunk_size)
                if not chunk:
                    break
                yield chunk
        finally:
            body.close()

    async def create_multipart_upload(self, key: str, content_type: Optional[str] = None) -> str:
        params = {"Bucket": self.bucket, "Key": key}
        if content_type:
            params["ContentType"] = content_type
        response = await asyncio.to_thread(self.client.create_multipart_upload, **params)
        return response["UploadId"]

    async def upload_part(self, upload_id: str, key: str, part_number: int, data: bytes) -> dict:
        response = await asyncio.to_thread(
            self.client.upload_part,
            Bucket=self.bucket,
            Key=key,
            UploadId=upload_id,
            PartNumber=part_number,
            Body=data,
        )
        return {"etag": response["ETag"]}

    async def complete_multipart(self, upload_id: str, key: str, parts: Iterable[Tuple[int, str]]) -> dict:
        """Assemble parts, given as (part_number, etag) in the order to forward them"""
        response = await asyncio.to_thread(
            self.client.complete_multipart_upload,
            Bucket=self.bucket,
            Key=key,
            UploadId=upload_id,
            MultipartUpload={"Parts": [{"PartNumber": n, "ETag": etag} for n, etag in parts]},
        )
        return {"location": response.get("Location") or self._location(key)}

    async def sign(self, key: str, ttl_seconds: int) -> str:
        """Time-limited GET URL for an object"""
        return await asyncio.to_thread(
            self.client.generate_presigned_url,
            "get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=ttl_seconds,
        )
