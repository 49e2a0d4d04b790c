"""
First-start data: the default menu categories and, optionally, an admin account.
"""
import logging

from sqlalchemy import func, select

from chef_site.database import Database
from chef_site.models import Category, User
from chef_site.services.users import normalize_email
from chef_site.utils.auth import hash_password

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {
        "id": "appetizers",
        "name": "Appetizers",
        "description": "Start your meal with our delicious appetizers",
        "color": "#e74c3c",
        "icon": "fas fa-leaf",
        "display_order": 1,
    },
    {
        "id": "mains",
        "name": "Main Courses",
        "description": "Our signature main dishes",
        "color": "#f39c12",
        "icon": "fas fa-utensils",
        "display_order": 2,
    },
    {
        "id": "desserts",
        "name": "Desserts",
        "description": "Sweet endings to your meal",
        "color": "#9b59b6",
        "icon": "fas fa-ice-cream",
        "display_order": 3,
    },
    {
        "id": "beverages",
        "name": "Beverages",
        "description": "Refreshing drinks and beverages",
        "color": "#3498db",
        "icon": "fas fa-glass-martini-alt",
        "display_order": 4,
    },
]


async def seed_default_data(database: Database, admin_email: str, admin_password: str) -> None:
    """
    Insert default categories into an empty categories table, and a default
    admin into an empty users table when an admin password is configured.
    """
    async with database.session() as session:
        if not await session.scalar(select(func.count(Category.id))):
            session.add_all(Category(**values) for values in DEFAULT_CATEGORIES)
            logger.info(f"Inserted {len(DEFAULT_CATEGORIES)} default categories")

        if not await session.scalar(select(func.count(User.id))):
            if admin_password:
                session.add(User(
                    first_name="Chef",
                    last_name="Stefan",
                    email=normalize_email(admin_email),
                    password_hash=hash_password(admin_password),
                    role="admin",
                ))
                logger.info(f"Created default admin user {admin_email}")
            else:
                logger.warning(
                    "No users exist and DEFAULT_ADMIN_PASSWORD is not set; "
                    "run create_admin_user.py to create an admin account"
                )
