from storeadmin.schemas.base import CamelModel, Pagination
from storeadmin.schemas.catalog import (
    BulkSortOrderRequest,
    BulkSortOrderResponse,
    CategoryCreate,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
    CollectionCreate,
    CollectionListResponse,
    CollectionResponse,
    CollectionUpdate,
    ProductCreate,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
    SortOrderEntry,
    StockUpdate,
)
from storeadmin.schemas.discount import (
    Cart,
    CartLine,
    Combinations,
    DiscountApplyRequest,
    DiscountApplyResponse,
    DiscountCreate,
    DiscountListResponse,
    DiscountResponse,
    DiscountUpdate,
    DiscountValidateRequest,
    DiscountValidateResponse,
    ValidateProgress,
)
from storeadmin.schemas.dynamic_page import (
    DynamicPageCreate,
    DynamicPageResponse,
    DynamicPageUpdate,
)
from storeadmin.schemas.listing import (
    ListingListResponse,
    ListingResponse,
    ListingStatusUpdate,
    ListingSummary,
    ListingWrite,
)

__all__ = [
    "BulkSortOrderRequest",
    "BulkSortOrderResponse",
    "CamelModel",
    "Cart",
    "CartLine",
    "CategoryCreate",
    "CategoryListResponse",
    "CategoryResponse",
    "CategoryUpdate",
    "CollectionCreate",
    "CollectionListResponse",
    "CollectionResponse",
    "CollectionUpdate",
    "Combinations",
    "DiscountApplyRequest",
    "DiscountApplyResponse",
    "DiscountCreate",
    "DiscountListResponse",
    "DiscountResponse",
    "DiscountUpdate",
    "DiscountValidateRequest",
    "DiscountValidateResponse",
    "DynamicPageCreate",
    "DynamicPageResponse",
    "DynamicPageUpdate",
    "ListingListResponse",
    "ListingResponse",
    "ListingStatusUpdate",
    "ListingSummary",
    "ListingWrite",
    "Pagination",
    "ProductCreate",
    "ProductListResponse",
    "ProductResponse",
    "ProductUpdate",
    "SortOrderEntry",
    "StockUpdate",
    "ValidateProgress",
]
