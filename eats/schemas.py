"""
Pydantic Schemas and Service Result Shapes

Input schemas validate everything that reaches the service layer; the
dataclasses at the bottom are the uniform shapes services hand back.

Version: 1.0.0
"""

import math
from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, EmailStr, Field, field_validator

from eats.core.errors import ErrorKind
from eats.models import Category, OrderStatus, UserRole


# =============================================================================
# USERS
# =============================================================================

class CreateAccountInput(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=4, max_length=128)
    role: UserRole = UserRole.CLIENT


class LoginInput(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class EditProfileInput(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=4, max_length=128)


# =============================================================================
# RESTAURANTS
# =============================================================================

def strip_whitespace(v):
    """Trim surrounding whitespace before length limits are checked."""
    if isinstance(v, str):
        return v.strip()
    return v


class CreateRestaurantInput(BaseModel):
    """Request schema for creating a restaurant."""
    name: str = Field(..., min_length=5, max_length=100, examples=["Pizza Palace"])
    address: str = Field(default="Online", min_length=5, max_length=255)
    avatar: str = Field(default="default-avatar.png", max_length=500)
    category_name: str = Field(..., min_length=1, max_length=100, examples=["Italian Food"])

    @field_validator("name", "address", "category_name", mode="before")
    @classmethod
    def strip_text(cls, v):
        return strip_whitespace(v)


class EditRestaurantInput(BaseModel):
    """Partial update; only supplied fields are written."""
    restaurant_id: int
    name: Optional[str] = Field(None, min_length=5, max_length=100)
    address: Optional[str] = Field(None, min_length=5, max_length=255)
    avatar: Optional[str] = Field(None, max_length=500)
    category_name: Optional[str] = Field(None, min_length=1, max_length=100)

    @field_validator("name", "address", "category_name", mode="before")
    @classmethod
    def strip_text(cls, v):
        return strip_whitespace(v)

    def changes(self) -> dict:
        """Column values explicitly supplied by the caller."""
        return self.model_dump(
            exclude_none=True,
            exclude={"restaurant_id", "category_name"},
        )


class RestaurantIdInput(BaseModel):
    restaurant_id: int


class PageInput(BaseModel):
    page: int = Field(default=1, ge=1)


class CategoryInput(PageInput):
    slug: str = Field(..., min_length=1)


class SearchRestaurantInput(PageInput):
    query: str = Field(..., min_length=1, max_length=100)


# =============================================================================
# DISHES
# =============================================================================

class DishChoiceSchema(BaseModel):
    name: str = Field(..., min_length=1)
    extra: Optional[float] = Field(None, ge=0)


class DishOptionSchema(BaseModel):
    name: str = Field(..., min_length=1)
    choices: Optional[List[DishChoiceSchema]] = None
    extra: Optional[float] = Field(None, ge=0)


class CreateDishInput(BaseModel):
    restaurant_id: int
    name: str = Field(..., min_length=5, max_length=100)
    price: float = Field(..., ge=0)
    photo: Optional[str] = Field(None, max_length=500)
    description: str = Field(..., min_length=5, max_length=140)
    options: List[DishOptionSchema] = Field(default_factory=list)


class EditDishInput(BaseModel):
    dish_id: int
    name: Optional[str] = Field(None, min_length=5, max_length=100)
    price: Optional[float] = Field(None, ge=0)
    photo: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = Field(None, min_length=5, max_length=140)
    options: Optional[List[DishOptionSchema]] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True, exclude={"dish_id"})


class DishIdInput(BaseModel):
    dish_id: int


# =============================================================================
# ORDERS
# =============================================================================

class OrderItemOptionSchema(BaseModel):
    name: str = Field(..., min_length=1)
    choice: Optional[str] = None


class CreateOrderItemInput(BaseModel):
    dish_id: int
    options: List[OrderItemOptionSchema] = Field(default_factory=list)


class CreateOrderInput(BaseModel):
    restaurant_id: int
    items: List[CreateOrderItemInput] = Field(..., min_length=1)


class GetOrdersInput(BaseModel):
    status: Optional[OrderStatus] = None


class OrderIdInput(BaseModel):
    order_id: int


class EditOrderInput(BaseModel):
    order_id: int
    status: OrderStatus


# =============================================================================
# RESULT SHAPES
# =============================================================================

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Outcome of a service operation.

    Either ``ok`` with an optional ``value``, or not ``ok`` with an
    ``error_kind`` and a human readable ``error``. Never both.
    """
    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    def __post_init__(self):
        if self.ok and (self.error is not None or self.error_kind is not None):
            raise ValueError("A successful result cannot carry an error")
        if not self.ok and self.error_kind is None:
            raise ValueError("A failed result needs an error kind")

    @classmethod
    def success(cls, value: Optional[T] = None) -> "ServiceResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "ServiceResult[T]":
        return cls(ok=False, error=message, error_kind=kind)


@dataclass
class Page(Generic[T]):
    """One page of a skip/take query."""
    items: List[T] = field(default_factory=list)
    page: int = 1
    total_pages: int = 0
    total_results: int = 0

    @classmethod
    def build(cls, items: List[T], page: int, page_size: int, total_results: int) -> "Page[T]":
        return cls(
            items=items,
            page=page,
            total_pages=math.ceil(total_results / page_size),
            total_results=total_results,
        )


@dataclass
class CategoryPage:
    """A category together with one page of its restaurants."""
    category: Category
    restaurants: Page
