from storeadmin.models.category import Category
from storeadmin.models.collection import Collection, product_collections
from storeadmin.models.discount import Discount, DiscountMethod, DiscountStatus, DiscountType
from storeadmin.models.dynamic_page import DynamicPage, DynamicPageSection
from storeadmin.models.product import Product, ProductStatus

__all__ = [
    "Category",
    "Collection",
    "Discount",
    "DiscountMethod",
    "DiscountStatus",
    "DiscountType",
    "DynamicPage",
    "DynamicPageSection",
    "Product",
    "ProductStatus",
    "product_collections",
]
