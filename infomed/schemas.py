"""
Pydantic models for the payloads exchanged with the InfoMed API.

The API speaks camelCase JSON with MongoDB-style ``_id`` keys. Models accept
either the wire alias or the Python field name, and keep unknown fields.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema with the camelCase wire format."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        coerce_numbers_to_str=True,
        extra="allow",
    )

    def to_wire(self) -> dict[str, Any]:
        """Serialize back to the API's camelCase keys."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class AdminProfile(BaseSchema):
    """Identity of the logged-in admin. Exact shape is owned by the API."""
    id: Optional[str] = Field(None, validation_alias=AliasChoices("_id", "id"), serialization_alias="id")
    name: str = ""
    email: str = ""


class InfoRecord(BaseSchema):
    """
    Medicine information record.

    The ten medicine attributes are submitted by the admin; the remaining
    fields are assigned by the service.
    """
    medicine_name: str = ""
    usage: str = ""
    dosage: str = ""
    exp: str = ""
    man: str = ""
    price: str = ""
    btno: str = ""
    comp_name: str = ""
    instr: str = ""
    drugs: str = ""

    id: Optional[str] = Field(None, validation_alias=AliasChoices("_id", "id"), serialization_alias="_id")
    unique_id: Optional[str] = None
    created_at: Optional[datetime] = None
    last_viewed: Optional[datetime] = None
    view_count: int = 0
    is_active: bool = True
    qr_code_url: Optional[str] = None


class Pagination(BaseModel):
    """Pagination block returned by GET /info."""
    current: int = 1
    pages: int = 1
    total: int = 0


class Language(BaseModel):
    """Translation target offered by the API."""
    code: str
    name: str
