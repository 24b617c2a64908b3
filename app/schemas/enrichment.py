# app/schemas/enrichment.py
from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, computed_field


class EnrichedUser(BaseModel):
    """Read-only projection of a user record owned by the user service."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    id: int
    name: str = Field(validation_alias=AliasChoices("name", "nombre"))
    email: str = Field(validation_alias=AliasChoices("email", "contactAddress", "correo"))


class EnrichedProduct(BaseModel):
    """Read-only projection of a catalog product owned by the product service."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    id: int
    name: str = Field(validation_alias=AliasChoices("name", "nombre"))
    price: float = Field(validation_alias=AliasChoices("price", "unitPrice", "precio"))
    stock: int = 0

    @computed_field
    @property
    def available(self) -> bool:
        return self.stock > 0
