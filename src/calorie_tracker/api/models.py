"""Pydantic request models for the HTTP API."""

import base64
import binascii

from pydantic import BaseModel, Field


class ImageAnalysisRequest(BaseModel):
    """A photo as a data URL or bare base64 string."""

    image: str = Field(min_length=1)

    def image_bytes(self) -> bytes:
        """Decode the image payload, raising ValueError if it is not base64."""
        data = self.image
        if data.startswith("data:"):
            _, _, data = data.partition(",")
        try:
            return base64.b64decode(data, validate=True)
        except binascii.Error as exc:
            raise ValueError("Image is not valid base64") from exc
