"""
Filesystem blob store for local development and tests
"""

import anyio

from src.platform.exception.exceptions import BlobUploadError
from src.platform.logging.loguru_io import Logger
from src.service.catalog.app.interface.i_blob_store import IBlobStore


class LocalBlobStoreImpl(IBlobStore):
    def __init__(self, *, root_dir: str) -> None:
        self.root_dir = anyio.Path(root_dir)

    @Logger.io(truncate_content=True)
    async def put(self, *, key: str, data: bytes, content_type: str) -> str:
        root = await self.root_dir.resolve()
        target = await (root / key).resolve()
        if not target.is_relative_to(root):
            raise BlobUploadError(f'Blob key escapes the store root: {key}')

        try:
            await target.parent.mkdir(parents=True, exist_ok=True)
            await target.write_bytes(data)
        except OSError as e:
            raise BlobUploadError(f'Writing {key} failed: {e}') from e

        Logger.base.info(f'🖼️ [BLOB_PUT] Stored {len(data)} bytes ({content_type}) at {target}')
        return target.as_uri()
