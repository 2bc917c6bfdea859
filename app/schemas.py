"""Pydantic schemas for HTTP API requests and responses."""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Request(BaseModel):
    """Request bodies keep only their declared fields."""
    model_config = ConfigDict(extra="ignore")


class Response(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class CustomerRequest(Request):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    observation: Optional[str] = None


class CategoryRequest(Request):
    name: str = Field(..., min_length=1)
    image_url: str = Field(..., min_length=1)
    category_id: Optional[int] = None


class FeatureRequest(Request):
    name: str = Field(..., min_length=1)


class PackingRequest(Request):
    name: str = Field(..., min_length=1)
    size: float = Field(..., ge=0)
    unit: str = Field(..., min_length=1)
    unit_abbreviation: str = Field(..., min_length=1)
    cost: float = Field(..., ge=0)


class ProductPackingRequest(Request):
    packing_id: int
    price: float = Field(0, ge=0)
    quantity: float = Field(0, ge=0)


class ProductRequest(Request):
    name: str = Field(..., min_length=1)
    description: str
    is_packed: bool
    unit_cost: float = Field(..., ge=0)
    unit_price: Optional[float] = Field(None, ge=0)
    category_id: int
    is_activated: bool = True
    packings: List[ProductPackingRequest] = Field(default_factory=list)
    features: List[int] = Field(default_factory=list)

    @model_validator(mode="after")
    def unpacked_products_have_a_price(self):
        if not self.is_packed and self.unit_price is None:
            raise ValueError("Unit price is required when the product is not packed")
        return self


class CreatedResponse(BaseModel):
    id: int


class CustomerResponse(Response):
    id: Optional[int] = None
    name: str
    email: str
    address: str
    phone: str
    observation: Optional[str] = None


class CategoryResponse(Response):
    id: Optional[int] = None
    name: str
    image_url: str
    category_id: Optional[int] = None


class FeatureResponse(Response):
    id: Optional[int] = None
    name: str


class PackingResponse(Response):
    id: Optional[int] = None
    name: str
    size: float
    unit: str
    unit_abbreviation: str
    cost: float


class ProductPackingResponse(Response):
    id: Optional[int] = None
    product_id: int
    packing_id: int
    price: float
    quantity: float


class PackingOptionResponse(PackingResponse):
    product_packing: Optional[ProductPackingResponse] = None


class ProductResponse(Response):
    id: Optional[int] = None
    name: str
    description: str
    is_packed: bool
    unit_cost: float
    unit_price: Optional[float] = None
    category_id: int
    is_activated: bool
    category: Optional[CategoryResponse] = None
    features: List[FeatureResponse] = []
    packings: List[PackingOptionResponse] = []


class OrderItemResponse(Response):
    id: Optional[int] = None
    product_id: int
    packing_id: Optional[int] = None
    amount: float
    unit_price: Optional[float] = None
    product: Optional[ProductResponse] = None
    packing: Optional[PackingResponse] = None


class OrderResponse(Response):
    id: Optional[int] = None
    customer_id: int
    order_date: str
    delivery_date: str
    status: str
    discount: float
    shipping: float
    observation: Optional[str] = None
    items: List[OrderItemResponse]
    total_amount: float
    customer: Optional[CustomerResponse] = None


class OrderStatusResponse(BaseModel):
    id: int
    status: str
