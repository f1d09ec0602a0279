from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _CompatModel(BaseModel):
    """Base model: ignore unknown fields, accept both wire and python names."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SendEmailRequest(_CompatModel):
    """Body of ``POST /api/send-email``.

    Fields are optional at the schema level so that a missing field is
    reported as ``400 Missing required fields`` instead of a 422.
    """

    to_email: Optional[str] = Field(None, alias="toEmail", description="Recipient address")
    to_name: Optional[str] = Field(None, alias="toName", description="Recipient display name")
    from_name: Optional[str] = Field(None, alias="fromName", description="Sender display name")
    message: Optional[str] = Field(None, description="Card message, may contain line breaks")
    image: Optional[str] = Field(None, description="Card image as data URI or remote URL")

    def missing_fields(self) -> List[str]:
        missing: List[str] = []
        for name, info in type(self).model_fields.items():
            if not getattr(self, name):
                missing.append(info.alias or name)
        return missing


class GenerateCardRequest(_CompatModel):
    """Body of ``POST /api/generate-card``: the uploaded photo plus optional card fields."""

    image: Optional[str] = Field(None, description="Uploaded photo as a base64 data URI")
    from_name: Optional[str] = Field(None, alias="fromName")
    to_name: Optional[str] = Field(None, alias="toName")
    message: Optional[str] = None


class GenerateCardResponse(_CompatModel):
    image_url: str = Field(..., alias="imageUrl", description="Data URI or remote URL of the card")
    saved: bool = Field(False, description="Whether the card record was persisted")
    warning: Optional[str] = Field(None, description="Non-fatal persistence problem")


__all__ = [
    "GenerateCardRequest",
    "GenerateCardResponse",
    "SendEmailRequest",
]
