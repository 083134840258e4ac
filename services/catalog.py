"""Storage collaborator used to resolve reconciled imports."""

from typing import Optional


class CatalogStorage:
    """Adapts the category and subcategory services to the operations the
    reconciler needs: look up a category by name, create a category, create
    a subcategory. Each returns plain IDs.

    Args:
        categories: CategoryService instance.
        subcategories: SubCategoryService instance.
    """

    def __init__(self, categories, subcategories):
        self.categories = categories
        self.subcategories = subcategories

    def find_category_by_name(self, name: str) -> Optional[int]:
        category = self.categories.find_by_name(name)
        return category.id if category else None

    def create_category(
        self, name: str, description: Optional[str], display_order: Optional[int]
    ) -> int:
        return self.categories.create(name, description, display_order).id

    def create_subcategory(
        self,
        category_id: int,
        name: str,
        description: Optional[str],
        display_order: Optional[int],
    ) -> int:
        return self.subcategories.create(
            category_id, name, description, display_order
        ).id
