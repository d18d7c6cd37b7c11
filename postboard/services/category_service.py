"""Category service: admin-managed flat list of labels."""
import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError

from postboard.errors import NotFoundError
from postboard.extensions import db
from postboard.forms.categories import validate_create_category
from postboard.models.category import Category

logger = logging.getLogger(__name__)


class CategoryService:
    """CRUD over categories. Access policy is enforced by the routes."""

    def create(self, title: str, owner_id: int) -> Category:
        """
        Create a category.

        Raises:
            ValidationError: If the title is missing or empty
        """
        data = validate_create_category({"title": title} if title is not None else {})

        try:
            category = Category.create(title=data.title, user_id=owner_id)
        except SQLAlchemyError:
            db.session.rollback()
            raise

        logger.info(f"Category created - ID: {category.id}, User: {owner_id}")
        return category

    def list_all(self) -> List[Category]:
        return Category.get_all()

    def delete_by_id(self, category_id: int) -> int:
        """
        Delete a category. Posts filed under its title are not touched.

        Returns:
            The deleted category's id

        Raises:
            NotFoundError: If the category does not exist
        """
        category = Category.get(category_id)
        if category is None:
            raise NotFoundError("Category not found")

        try:
            category.delete()
        except SQLAlchemyError:
            db.session.rollback()
            raise

        logger.info(f"Category deleted - ID: {category_id}")
        return category_id
