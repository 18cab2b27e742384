from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class CompanyProfile(BaseModel):
    """Company payload returned by ``GET /{version}/admin/company``.

    Genuka is not consistent with casing (``logo_url`` vs ``logoUrl``) and
    keeps the phone either at the top level or in ``metadata.contact``.
    """

    model_config = ConfigDict(extra="ignore")

    name: str
    handle: Optional[str] = None
    description: Optional[str] = None
    logo_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("logo_url", "logoUrl"))
    phone: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _phone_from_metadata(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        metadata = data.get("metadata")
        contact = metadata.get("contact") if isinstance(metadata, dict) else None
        if contact:
            data = {**data, "phone": str(contact)}
        return data


class CompanyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    handle: Optional[str] = None
    name: str
    description: Optional[str] = None
    logo_url: Optional[str] = None
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
