"""
SQLAlchemy database models.

The catalog engine only reads these tables:
- Categories (unique names, matched case-insensitively)
- Products (scalar attributes, one category each)
- Ratings (one per product/user pair, values 1-5)

Average rating is never stored; it is derived from the ratings collection on
every read (see catalog.query.ratings).
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from catalog.data.database import Base


class Category(Base):
    """Product category, referenced by name in filters."""
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True, index=True)

    # "Laptop" and "laptop" are the same category
    __table_args__ = (
        Index("uq_category_name_lower", func.lower(name), unique=True),
    )

    products = relationship("Product", back_populates="category")

    def __repr__(self) -> str:
        return f"<Category id={self.id} name={self.name!r}>"


class Product(Base):
    """
    Product catalog entry.

    memory / screen_size / battery_capacity / operating_system / color are
    free-text and category dependent: a TV has no battery, headphones have no
    operating system, so all of them are nullable.
    """
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_product_price_non_negative"),
        Index("idx_product_brand", "brand"),
        Index("idx_product_price", "price"),
        Index("idx_product_color", "color"),
        Index("idx_product_memory", "memory"),
        Index("idx_product_screen_size", "screen_size"),
        Index("idx_product_battery_capacity", "battery_capacity"),
        Index("idx_product_operating_system", "operating_system"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    brand = Column(String(100), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    description = Column(String(512), nullable=True)
    image = Column(String(512), nullable=True)

    memory = Column(String(50), nullable=True)
    screen_size = Column(String(50), nullable=True)
    battery_capacity = Column(String(50), nullable=True)
    operating_system = Column(String(50), nullable=True)
    color = Column(String(50), nullable=True)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    category = relationship("Category", back_populates="products")

    ratings = relationship(
        "Rating",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="Rating.id",
    )

    # Metadata
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def category_name(self):
        return self.category.name if self.category is not None else None

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} price={self.price}>"


class Rating(Base):
    """A single user's 1-5 rating of a product."""
    __tablename__ = "ratings"
    __table_args__ = (
        UniqueConstraint("product_id", "user_id", name="uq_rating_product_user"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_rating_range"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    value = Column("rating", Integer, nullable=False)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    # Users live in the auth service; only the id is kept here
    user_id = Column(Integer, nullable=False, index=True)

    product = relationship("Product", back_populates="ratings")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<Rating product_id={self.product_id} user_id={self.user_id} value={self.value}>"
