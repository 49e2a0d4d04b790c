"""
Pydantic schemas for request and response data validation.
Defines data structures for API endpoints with automatic validation and serialization.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from typing_extensions import Annotated

RequiredStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

BookingStatus = Literal["pending", "confirmed", "in_progress", "completed", "cancelled"]
PostStatus = Literal["draft", "published", "archived"]


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    message: str


# ---------------------------------------------------------------------------
# Auth / users
# ---------------------------------------------------------------------------

class LoginRequest(BaseModel):
    """Both fields are checked by the login route so a missing one gets a specific message."""
    email: Optional[str] = None
    password: Optional[str] = None


class SessionUser(BaseModel):
    """Identity stored in the server-side session and returned by /api/auth/me."""
    id: str
    email: str
    first_name: str
    last_name: str
    role: str


class LoginResponse(BaseModel):
    message: str
    user: SessionUser


class CurrentUserResponse(BaseModel):
    user: SessionUser


class UserResponse(ORMModel):
    """User row as returned by the API. The password hash is never included."""
    id: str
    first_name: str
    last_name: str
    email: str
    role: str
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class UserCreate(BaseModel):
    first_name: RequiredStr
    last_name: RequiredStr
    email: RequiredStr
    password: Annotated[str, StringConstraints(min_length=1)]
    role: RequiredStr = "admin"


class UserUpdate(BaseModel):
    first_name: Optional[RequiredStr] = None
    last_name: Optional[RequiredStr] = None
    email: Optional[RequiredStr] = None
    role: Optional[RequiredStr] = None
    is_active: Optional[bool] = None
    password: Optional[Annotated[str, StringConstraints(min_length=1)]] = None


# ---------------------------------------------------------------------------
# Menu
# ---------------------------------------------------------------------------

class CategoryResponse(ORMModel):
    id: str
    name: str
    description: Optional[str] = None
    color: str
    icon: str
    image_path: Optional[str] = None
    display_order: int
    created_at: datetime
    updated_at: datetime


class CategoryCreate(BaseModel):
    name: RequiredStr
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    display_order: Optional[int] = None


class CategoryUpdate(BaseModel):
    name: Optional[RequiredStr] = None
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    display_order: Optional[int] = None


class MenuItemResponse(ORMModel):
    id: str
    name: str
    description: Optional[str] = None
    price: Decimal
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    category_color: Optional[str] = None
    image_path: Optional[str] = None
    available: bool
    featured: bool
    created_at: datetime
    updated_at: datetime


class MenuItemCreate(BaseModel):
    """Built from multipart form fields."""
    name: RequiredStr
    description: Optional[str] = None
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    category_id: Optional[str] = None
    available: bool = True
    featured: bool = False


class MenuItemUpdate(BaseModel):
    name: Optional[RequiredStr] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    category_id: Optional[str] = None
    available: Optional[bool] = None
    featured: Optional[bool] = None


# ---------------------------------------------------------------------------
# Gallery
# ---------------------------------------------------------------------------

class GalleryImageResponse(ORMModel):
    """
    Response schema for gallery image data.
    Used by the /api/gallery endpoints.
    """
    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    image_path: str
    type: str
    featured: bool
    file_size: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class GalleryImageUpdate(BaseModel):
    """
    Request schema for updating gallery image metadata.
    Omitted fields are left unchanged.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[RequiredStr] = None
    featured: Optional[bool] = None


# ---------------------------------------------------------------------------
# Bookings and public forms
# ---------------------------------------------------------------------------

class SelectedDish(BaseModel):
    """One line of a dish selection. Stored with the frontend's `totalPrice` key."""
    model_config = ConfigDict(populate_by_name=True)

    dish: RequiredStr
    quantity: int = Field(ge=1)
    price: float = Field(ge=0)
    total_price: float = Field(ge=0, alias="totalPrice")


class BookingFields(BaseModel):
    customer_name: RequiredStr
    customer_email: RequiredStr
    customer_phone: RequiredStr
    event_date: RequiredStr
    event_type: Optional[str] = None
    event_time: Optional[str] = None
    location: Optional[str] = None
    meal_type: Optional[str] = None
    occasion: Optional[str] = None
    dietary_restrictions: Optional[str] = None
    food_style: Optional[str] = None
    additional_info: Optional[str] = None
    selected_dishes: Optional[List[SelectedDish]] = None
    total_amount: Optional[Decimal] = Field(default=None, ge=0)


class BookingCreate(BookingFields):
    """Public booking submission (POST /api/bookings)."""


class CateringInquiry(BookingFields):
    """Catering form submission (POST /api/catering-inquiry)."""


class BookingUpdate(BaseModel):
    """Admin update. Only the provided fields change."""
    status: Optional[BookingStatus] = None
    total_amount: Optional[Decimal] = Field(default=None, ge=0)
    additional_info: Optional[str] = None


class BookingResponse(ORMModel):
    id: str
    customer_name: str
    customer_email: str
    customer_phone: str
    event_type: Optional[str] = None
    event_date: str
    event_time: Optional[str] = None
    location: Optional[str] = None
    meal_type: Optional[str] = None
    occasion: Optional[str] = None
    dietary_restrictions: Optional[str] = None
    food_style: Optional[str] = None
    additional_info: Optional[str] = None
    selected_dishes: Optional[List[Dict[str, Any]]] = None
    total_amount: Optional[Decimal] = None
    status: str
    created_at: datetime
    updated_at: datetime


class ContactForm(BaseModel):
    name: RequiredStr
    email: RequiredStr
    subject: RequiredStr
    message: RequiredStr


class TableBookingForm(BaseModel):
    name: RequiredStr
    email: RequiredStr
    phone: RequiredStr
    date: RequiredStr
    time: RequiredStr
    people: int = Field(ge=1)
    occasion: Optional[str] = None
    dietary_requirements: Optional[str] = None
    special_requests: Optional[str] = None


class CartBookingForm(BaseModel):
    customer_name: RequiredStr
    customer_email: RequiredStr
    customer_phone: RequiredStr
    event_date: RequiredStr
    event_time: RequiredStr
    guest_count: int = Field(ge=1)
    location: Optional[str] = None
    special_requests: Optional[str] = None
    selected_dishes: Optional[List[SelectedDish]] = None
    total_amount: Optional[Decimal] = Field(default=None, ge=0)
    booking_source: Optional[str] = None


class FormSubmissionResponse(BaseModel):
    success: bool
    message: str
    booking: Optional[BookingResponse] = None


# ---------------------------------------------------------------------------
# Blog
# ---------------------------------------------------------------------------

class BlogCategoryResponse(ORMModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    color: str
    display_order: int
    post_count: int = 0
    created_at: datetime
    updated_at: datetime


class BlogCategoryCreate(BaseModel):
    name: RequiredStr
    description: Optional[str] = None
    color: Optional[str] = None
    display_order: Optional[int] = None


class BlogCategoryUpdate(BaseModel):
    name: Optional[RequiredStr] = None
    description: Optional[str] = None
    color: Optional[str] = None
    display_order: Optional[int] = None


class BlogPostResponse(ORMModel):
    id: str
    title: str
    slug: str
    excerpt: Optional[str] = None
    content: str
    featured_image: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    category_slug: Optional[str] = None
    category_color: Optional[str] = None
    author_id: Optional[str] = None
    author_name: Optional[str] = None
    status: str
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    seo_keywords: Optional[str] = None
    view_count: int
    reading_time: int
    tags: Optional[List[str]] = None
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class RecentPostResponse(ORMModel):
    id: str
    title: str
    slug: str
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    published_at: Optional[datetime] = None
    reading_time: int
    category_name: Optional[str] = None
    category_color: Optional[str] = None


class BlogPostCreate(BaseModel):
    title: RequiredStr
    content: RequiredStr
    excerpt: Optional[str] = None
    category_id: Optional[str] = None
    status: PostStatus = "draft"
    featured_image: Optional[str] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    seo_keywords: Optional[str] = None
    tags: Optional[List[str]] = None


class BlogPostUpdate(BaseModel):
    title: Optional[RequiredStr] = None
    content: Optional[RequiredStr] = None
    excerpt: Optional[str] = None
    category_id: Optional[str] = None
    status: Optional[PostStatus] = None
    featured_image: Optional[str] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    seo_keywords: Optional[str] = None
    tags: Optional[List[str]] = None


class PaginationMetadata(BaseModel):
    """
    Page-number pagination metadata.
    Serialized with the camelCase keys the blog frontend reads.
    """
    current_page: int = Field(serialization_alias="currentPage")
    total_pages: int = Field(serialization_alias="totalPages")
    total_posts: int = Field(serialization_alias="totalPosts")
    has_next_page: bool = Field(serialization_alias="hasNextPage")
    has_prev_page: bool = Field(serialization_alias="hasPrevPage")


class BlogPostsPageResponse(BaseModel):
    posts: List[BlogPostResponse]
    pagination: PaginationMetadata


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

class StatsResponse(BaseModel):
    categories: int
    menu_items: int
    gallery_images: int
    users: int
    bookings: int
