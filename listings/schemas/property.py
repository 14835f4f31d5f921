import uuid

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class _PropertyFields(BaseModel):
    image: str | None = None
    description: str | None = None
    address: str | None = None
    price: float | None = Field(default=None, allow_inf_nan=False)

    @field_validator("price", mode="before")
    @classmethod
    def blank_price_is_none(cls, value):
        # Multipart forms send "" for an empty price input
        if isinstance(value, str) and not value.strip():
            return None
        return value


class PropertyCreate(_PropertyFields):
    pass


class PropertyUpdate(_PropertyFields):
    """Only the fields explicitly set are applied to the stored record."""


class PropertyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    image: str | None
    description: str | None
    address: str | None
    price: float | None

    @field_serializer("price")
    def whole_price_as_int(self, price: float | None) -> float | int | None:
        # 250000.0 goes out as 250000
        if price is not None and price.is_integer():
            return int(price)
        return price


class MessageResponse(BaseModel):
    message: str
