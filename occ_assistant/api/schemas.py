"""API request schemas.

Field names follow the camelCase JSON the frontend sends. Required values
are checked in the routes so that missing input yields a 400 with the
expected error message rather than a validation 422.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, Any


class APIModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class RegisterRequest(APIModel):
    email: Optional[str] = None
    password: Optional[str] = None
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")


class LoginRequest(APIModel):
    email: Optional[str] = None
    password: Optional[str] = None


class SearchRequest(APIModel):
    query: Optional[str] = None


class CartAddRequest(APIModel):
    product_code: Optional[str] = Field(None, alias="productCode")
    # Display values from the search results; not sent to the platform
    product_name: Optional[Any] = Field(None, alias="productName")
    price: Optional[Any] = None
    quantity: Optional[int] = None

    @field_validator("product_code", mode="before")
    @classmethod
    def _code_as_string(cls, value):
        return str(value) if value is not None else None


class CartRemoveRequest(APIModel):
    item_id: Optional[Any] = Field(None, alias="itemId")


class CartUpdateRequest(APIModel):
    item_id: Optional[Any] = Field(None, alias="itemId")
    quantity: Optional[int] = None


class OrderCreateRequest(APIModel):
    shipping_address: Optional[Any] = Field(None, alias="shippingAddress")
    billing_address: Optional[Any] = Field(None, alias="billingAddress")
    payment_method: Optional[Any] = Field(None, alias="paymentMethod")
