from storeadmin.repositories.category_repository import CategoryRepository
from storeadmin.repositories.collection_repository import CollectionRepository
from storeadmin.repositories.discount_repository import DiscountRepository
from storeadmin.repositories.dynamic_page_repository import DynamicPageRepository
from storeadmin.repositories.product_repository import ProductRepository

__all__ = [
    "CategoryRepository",
    "CollectionRepository",
    "DiscountRepository",
    "DynamicPageRepository",
    "ProductRepository",
]
