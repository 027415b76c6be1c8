"""
Google Cloud Storage blob store (JSON API, simple media upload)

POST {endpoint}/upload/storage/v1/b/{bucket}/o?uploadType=media&name={key}
"""

from typing import Optional

import httpx

from src.platform.exception.exceptions import BlobUploadError
from src.platform.logging.loguru_io import Logger
from src.service.catalog.app.interface.i_blob_store import IBlobStore


class GcsBlobStoreImpl(IBlobStore):
    def __init__(
        self,
        *,
        bucket: str,
        endpoint: str = 'https://storage.googleapis.com',
        access_token: Optional[str] = None,
        timeout_seconds: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.bucket = bucket
        self.endpoint = endpoint.rstrip('/')
        self.access_token = access_token
        self.timeout_seconds = timeout_seconds
        self._client = client

    def _headers(self, content_type: str) -> dict[str, str]:
        headers = {'Content-Type': content_type}
        if self.access_token:
            headers['Authorization'] = f'Bearer {self.access_token}'
        return headers

    async def _post(
        self, client: httpx.AsyncClient, *, key: str, data: bytes, content_type: str
    ) -> httpx.Response:
        return await client.post(
            f'{self.endpoint}/upload/storage/v1/b/{self.bucket}/o',
            params={'uploadType': 'media', 'name': key},
            content=data,
            headers=self._headers(content_type),
        )

    @Logger.io(truncate_content=True)
    async def put(self, *, key: str, data: bytes, content_type: str) -> str:
        try:
            if self._client is not None:
                response = await self._post(
                    self._client, key=key, data=data, content_type=content_type
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                    response = await self._post(
                        client, key=key, data=data, content_type=content_type
                    )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise BlobUploadError(
                f'Upload of {key} to bucket {self.bucket} rejected with HTTP {e.response.status_code}'
            ) from e
        except httpx.HTTPError as e:
            raise BlobUploadError(f'Upload of {key} to bucket {self.bucket} failed: {e}') from e

        Logger.base.info(f'🖼️ [BLOB_PUT] Stored {len(data)} bytes at gs://{self.bucket}/{key}')
        return f'gs://{self.bucket}/{key}'
