import mimetypes
from pathlib import Path
from typing import BinaryIO, Union

import structlog

from adapters.meta.client import MetaClient, normalize_ad_account_id
from adapters.meta.exceptions import MetaAPIError
from adapters.meta.models.resource_model import UploadedImage
from core.credentials import Credential
from exceptions.custom_exceptions import BusinessValidationException

logger = structlog.get_logger(__name__)

ImageSource = Union[bytes, BinaryIO, str, Path]


def _read_image(image: ImageSource) -> bytes:
    if isinstance(image, (bytes, bytearray)):
        return bytes(image)
    if isinstance(image, (str, Path)):
        return Path(image).read_bytes()
    return image.read()


class MetaAdImageAdapter:
    def _get_client(self, credential: Credential) -> MetaClient:
        return MetaClient(credential)

    async def upload_image(
        self,
        ad_account_id: str,
        image: ImageSource,
        credential: Credential,
        filename: str = "image.jpg",
    ) -> UploadedImage:
        if isinstance(image, (str, Path)) and filename == "image.jpg":
            filename = Path(image).name
        content = _read_image(image)
        if not content:
            raise BusinessValidationException("Image file is empty")

        content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        account_id = normalize_ad_account_id(ad_account_id)
        response = await self._get_client(credential).post_form(
            f"/act_{account_id}/adimages",
            data={},
            files={filename: (filename, content, content_type)},
        )

        # {"images": {"<filename>": {"hash": ..., "url": ...}}}
        images = response.get("images") or {}
        first = next(iter(images.values()), None) if isinstance(images, dict) else None
        if not isinstance(first, dict) or not first.get("hash"):
            raise MetaAPIError("Meta API did not return an image hash", 200, {"response": response})

        logger.info("meta_image_uploaded", ad_account_id=account_id, image_hash=first["hash"])
        return UploadedImage(hash=first["hash"], url=first.get("url"), raw_response=response)


meta_ad_image_adapter = MetaAdImageAdapter()
