from abc import ABC, abstractmethod


class IBlobStore(ABC):
    @abstractmethod
    async def put(self, *, key: str, data: bytes, content_type: str) -> str:
        """
        Store bytes under key.

        Returns:
            Location reference to persist as the event image URL

        Raises:
            BlobUploadError: If the object could not be written
        """
        pass
