"""
SQLAlchemy Database Models

Relational mapping for the ordering platform:
- Users with a fixed role (client / owner / delivery)
- Categories keyed by a unique slug
- Restaurants owned by a user, optionally filed under a category
- Dishes with JSON option groups
- Orders and their items

Version: 1.0.0
"""

import enum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    JSON,
    String,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from eats.database import Base


class UserRole(str, enum.Enum):
    """Account role, chosen at sign-up."""
    CLIENT = "client"
    OWNER = "owner"
    DELIVERY = "delivery"


class OrderStatus(str, enum.Enum):
    """Order status workflow."""
    PENDING = "pending"
    COOKING = "cooking"
    COOKED = "cooked"
    PICKED_UP = "picked_up"
    DELIVERED = "delivered"


class CoreEntity:
    """
    Columns shared by every persisted entity.

    Mixed into each model rather than mapped on its own.
    """
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Fetch server-generated timestamps on flush; async sessions cannot lazy-load them
    __mapper_args__ = {"eager_defaults": True}


class User(CoreEntity, Base):
    __tablename__ = "users"

    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.CLIENT)
    verified = Column(Boolean, nullable=False, default=False)

    restaurants = relationship("Restaurant", back_populates="owner")
    orders = relationship(
        "Order", back_populates="customer", foreign_keys="Order.customer_id"
    )
    rides = relationship(
        "Order", back_populates="driver", foreign_keys="Order.driver_id"
    )

    def __repr__(self):
        return f"<User #{self.id} - {self.email} - {self.role.value}>"


class Category(CoreEntity, Base):
    __tablename__ = "categories"

    name = Column(String(100), nullable=False, unique=True)
    slug = Column(String(100), nullable=False, unique=True, index=True)
    cover_image = Column(String(500), nullable=True)

    restaurants = relationship("Restaurant", back_populates="category")

    def __repr__(self):
        return f"<Category #{self.id} - {self.slug}>"


class Restaurant(CoreEntity, Base):
    __tablename__ = "restaurants"

    name = Column(String(100), nullable=False, index=True)
    address = Column(String(255), nullable=False, default="Online")
    avatar = Column(String(500), nullable=False, default="default-avatar.png")
    verified = Column(Boolean, nullable=False, default=False)

    category_id = Column(
        Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True
    )
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    category = relationship("Category", back_populates="restaurants")
    owner = relationship("User", back_populates="restaurants")
    dishes = relationship(
        "Dish", back_populates="restaurant", cascade="all, delete-orphan"
    )
    orders = relationship("Order", back_populates="restaurant")

    def __repr__(self):
        return f"<Restaurant #{self.id} - {self.name} - verified={self.verified}>"


class Dish(CoreEntity, Base):
    __tablename__ = "dishes"

    name = Column(String(100), nullable=False)
    price = Column(Float, nullable=False)
    photo = Column(String(500), nullable=True)
    description = Column(String(140), nullable=False)
    # [{"name": str, "extra": float | None, "choices": [{"name": str, "extra": float | None}]}]
    options = Column(JSON, nullable=True)

    restaurant_id = Column(
        Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    restaurant = relationship("Restaurant", back_populates="dishes")

    def __repr__(self):
        return f"<Dish #{self.id} - {self.name} - {self.price}>"


class Order(CoreEntity, Base):
    __tablename__ = "orders"

    status = Column(
        Enum(OrderStatus),
        default=OrderStatus.PENDING,
        nullable=False,
        index=True
    )
    total = Column(Float, nullable=True)

    customer_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    driver_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    restaurant_id = Column(
        Integer, ForeignKey("restaurants.id", ondelete="SET NULL"), nullable=True, index=True
    )

    customer = relationship("User", back_populates="orders", foreign_keys=[customer_id])
    driver = relationship("User", back_populates="rides", foreign_keys=[driver_id])
    restaurant = relationship("Restaurant", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Order #{self.id} - {self.status.value} - {self.total}>"


class OrderItem(CoreEntity, Base):
    __tablename__ = "order_items"

    # [{"name": str, "choice": str | None}]
    options = Column(JSON, nullable=True)

    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    dish_id = Column(Integer, ForeignKey("dishes.id", ondelete="SET NULL"), nullable=True)

    order = relationship("Order", back_populates="items")
    dish = relationship("Dish")
