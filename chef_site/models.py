"""
SQLAlchemy models for the application.
All database models inherit from Base (declarative base).
"""
import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    inspect,
)
from sqlalchemy.sql import func

from chef_site.database import Base


def new_id() -> str:
    return str(uuid.uuid4())


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class Category(TimestampMixin, Base):
    """Menu category. Menu items reference it; deletion is refused while any do."""
    __tablename__ = "categories"

    id = Column(String(64), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    color = Column(String(20), nullable=False, default="#3498db")
    icon = Column(String(100), nullable=False, default="fas fa-utensils")
    image_path = Column(String(500), nullable=True)
    display_order = Column(Integer, nullable=False, default=0, index=True)


class MenuItem(TimestampMixin, Base):
    __tablename__ = "menu_items"

    id = Column(String(64), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    category_id = Column(
        String(64),
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    image_path = Column(String(500), nullable=True)
    available = Column(Boolean, nullable=False, default=True)
    featured = Column(Boolean, nullable=False, default=False)


class GalleryImage(TimestampMixin, Base):
    """
    Gallery image model.
    Stores the processed image path, its size on disk and display metadata.
    """
    __tablename__ = "gallery_images"

    id = Column(String(64), primary_key=True, default=new_id)
    title = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    image_path = Column(String(500), nullable=False)
    type = Column(String(50), nullable=False, default="food", index=True)
    featured = Column(Boolean, nullable=False, default=False)
    file_size = Column(Integer, nullable=True)


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id = Column(String(64), primary_key=True, default=new_id)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(50), nullable=False, default="admin")
    is_active = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime(timezone=True), nullable=True)


class Booking(TimestampMixin, Base):
    """
    Catering/table booking.
    `status` is a free string in storage; allowed values are enforced by the API.
    """
    __tablename__ = "bookings"

    id = Column(String(64), primary_key=True, default=new_id)
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(50), nullable=False)
    event_type = Column(String(100), nullable=True)
    event_date = Column(String(50), nullable=False)
    event_time = Column(String(50), nullable=True)
    location = Column(Text, nullable=True)
    meal_type = Column(String(100), nullable=True)
    occasion = Column(Text, nullable=True)
    dietary_restrictions = Column(Text, nullable=True)
    food_style = Column(String(100), nullable=True)
    additional_info = Column(Text, nullable=True)
    selected_dishes = Column(JSON, nullable=True)
    total_amount = Column(Numeric(10, 2), nullable=True)
    status = Column(String(50), nullable=False, default="pending", index=True)


class BlogCategory(TimestampMixin, Base):
    __tablename__ = "blog_categories"

    id = Column(String(64), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False, unique=True)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    color = Column(String(20), nullable=False, default="#cda45e")
    display_order = Column(Integer, nullable=False, default=0)


class BlogPost(TimestampMixin, Base):
    __tablename__ = "blog_posts"

    id = Column(String(64), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    excerpt = Column(Text, nullable=True)
    content = Column(Text, nullable=False)
    featured_image = Column(String(500), nullable=True)
    category_id = Column(String(64), ForeignKey("blog_categories.id", ondelete="SET NULL"), nullable=True)
    author_id = Column(String(64), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    status = Column(String(20), nullable=False, default="draft")
    seo_title = Column(String(255), nullable=True)
    seo_description = Column(Text, nullable=True)
    seo_keywords = Column(Text, nullable=True)
    view_count = Column(Integer, nullable=False, default=0)
    reading_time = Column(Integer, nullable=False, default=1)
    tags = Column(JSON, nullable=True)
    published_at = Column(DateTime(timezone=True), nullable=True)


class SessionRecord(Base):
    """Server-side login session. The cookie only carries the signed `sid`."""
    __tablename__ = "sessions"

    sid = Column(String(128), primary_key=True)
    sess = Column(JSON, nullable=False)
    expire = Column(DateTime(timezone=True), nullable=False)


class Contact(Base):
    """Write-once copy of a contact form submission."""
    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    subject = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


def columns_dict(instance) -> dict:
    """Mapped column values of an ORM instance, keyed by attribute name."""
    return {
        attr.key: getattr(instance, attr.key)
        for attr in inspect(instance).mapper.column_attrs
    }
