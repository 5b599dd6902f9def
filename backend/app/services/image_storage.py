import os
import uuid
from typing import Optional
from fastapi import UploadFile
from azure.storage.blob import BlobServiceClient, ContentSettings
from azure.core.exceptions import AzureError, ResourceNotFoundError
import logging

from ..core.settings import Settings, get_settings
from ..enums import ImageType
from ..exceptions import InvalidInputError, InternalError

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {
    ".jpg": ImageType.JPG,
    ".jpeg": ImageType.JPG,
    ".png": ImageType.PNG,
    ".gif": ImageType.GIF,
}

CONTENT_TYPES = {
    ImageType.JPG: "image/jpeg",
    ImageType.PNG: "image/png",
    ImageType.GIF: "image/gif",
}


class AzureImageStorage:
    """Stores business images in Azure Blob Storage.

    The blob client is created on first use so requests that carry no image
    never need storage credentials.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.container_name = self.settings.azure_blob_container_name
        self.max_size = self.settings.max_image_size_bytes
        self._blob_service_client: Optional[BlobServiceClient] = None

    @property
    def blob_service_client(self) -> BlobServiceClient:
        if self._blob_service_client is None:
            try:
                logger.info(f"Initializing Azure Blob Service with account: {self.settings.azure_storage_account_name}")
                self._blob_service_client = BlobServiceClient.from_connection_string(
                    self.settings.azure_connection_string
                )
                self._ensure_container_exists()
            except (AzureError, ValueError) as e:
                logger.error(f"Failed to initialize Azure Blob Service: {e}")
                self._blob_service_client = None
                raise InternalError("Failed to initialize image storage")
        return self._blob_service_client

    def _ensure_container_exists(self) -> None:
        container_client = self._blob_service_client.get_container_client(self.container_name)
        if not container_client.exists():
            container_client.create_container()
            logger.info(f"Created image container: {self.container_name}")

    def get_image_type(self, file: UploadFile) -> ImageType:
        """
        Validate the upload is a JPG, PNG or GIF image under the size limit

        Raises:
            InvalidInputError: naming the ``image`` field
        """
        if not file.filename:
            raise InvalidInputError("image", "Image filename is required")

        extension = os.path.splitext(file.filename)[1].lower()
        image_type = IMAGE_EXTENSIONS.get(extension)
        if image_type is None:
            raise InvalidInputError("image", "Only image files are allowed (jpg, jpeg, png, gif)")

        if file.content_type and not file.content_type.lower().startswith("image/"):
            raise InvalidInputError("image", "Only image files are allowed (jpg, jpeg, png, gif)")

        if file.size is not None and file.size > self.max_size:
            raise InvalidInputError(
                "image",
                f"Image exceeds limit of {self.max_size / (1024 * 1024):.1f}MB"
            )

        return image_type

    def _generate_blob_name(self, owner_id: int, filename: str) -> str:
        _, extension = os.path.splitext(filename)
        return f"businesses/{owner_id}/{uuid.uuid4()}{extension.lower()}"

    async def upload_image(self, file: UploadFile, owner_id: int) -> str:
        """
        Upload a business image and return its URL

        Args:
            file: FastAPI UploadFile object
            owner_id: ID of the user owning the business

        Returns:
            str: URL of the uploaded blob
        """
        image_type = self.get_image_type(file)
        blob_name = self._generate_blob_name(owner_id, file.filename)

        content = await file.read()
        await file.seek(0)
        if len(content) > self.max_size:
            raise InvalidInputError(
                "image",
                f"Image exceeds limit of {self.max_size / (1024 * 1024):.1f}MB"
            )

        try:
            blob_client = self.blob_service_client.get_blob_client(
                container=self.container_name,
                blob=blob_name
            )
            blob_client.upload_blob(
                data=content,
                overwrite=True,
                content_settings=ContentSettings(content_type=CONTENT_TYPES[image_type])
            )
        except AzureError as e:
            logger.error(f"Azure error during image upload: {e}")
            raise InternalError("Failed to upload image")

        logger.info(f"Uploaded image {file.filename} for user {owner_id} to {blob_client.url}")
        return blob_client.url

    async def delete_image(self, image_url: str) -> bool:
        """
        Release a stored image. Missing blobs count as already released.

        Returns:
            bool: True if the image is gone, False if deletion failed
        """
        marker = f"/{self.container_name}/"
        if marker not in image_url:
            logger.warning(f"Image URL is outside container {self.container_name}: {image_url}")
            return False

        blob_name = image_url.split(marker, 1)[1]
        try:
            blob_client = self.blob_service_client.get_blob_client(
                container=self.container_name,
                blob=blob_name
            )
            blob_client.delete_blob()
        except ResourceNotFoundError:
            logger.info(f"Image already removed: {blob_name}")
            return True
        except AzureError as e:
            logger.error(f"Azure error during image deletion: {e}")
            return False
        except InternalError:
            # storage unavailable; the business row is already gone
            return False

        logger.info(f"Deleted image blob: {blob_name}")
        return True


def get_image_storage() -> AzureImageStorage:
    """FastAPI dependency returning the image storage collaborator"""
    return AzureImageStorage()
