"""Pydantic models for product payloads."""

from typing import Optional

from pydantic import Field, field_validator

from .common import CamelModel


def _required_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Field must not be empty")
    return value


class ProductCreate(CamelModel):
    name: str = Field(..., examples=["Desk Lamp"])
    description: str = Field("", examples=["LED lamp with dimmer"])
    price: float = Field(..., ge=0, examples=[39.9])
    category: str = Field(..., examples=["Home"])
    stock: int = Field(..., ge=0, examples=[12])
    sku: str = Field("", examples=["HOME-002"])
    rating: float = Field(0, ge=0, le=5)
    image: Optional[str] = None

    @field_validator("name", "category")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        return _required_text(value)

    @field_validator("description", "sku")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()


class ProductUpdate(CamelModel):
    """Partial update; only fields present in the request are changed."""

    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    category: Optional[str] = None
    stock: Optional[int] = Field(None, ge=0)
    sku: Optional[str] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    image: Optional[str] = None

    @field_validator("name", "category")
    @classmethod
    def _not_blank(cls, value: Optional[str]) -> Optional[str]:
        return _required_text(value) if value is not None else value
