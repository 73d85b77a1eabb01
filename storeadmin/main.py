import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storeadmin.core.config import settings
from storeadmin.routers import (
    categories,
    collections,
    discounts,
    dynamic_pages,
    listings,
    products,
)

logger = logging.getLogger(__name__)

OPENAPI_TAGS = [
    {"name": "Discounts", "description": "Create, validate and redeem discount codes."},
    {"name": "Products", "description": "Manage products, stock and display order."},
    {"name": "Collections", "description": "Group products into collections."},
    {"name": "Categories", "description": "Organize products into categories."},
    {"name": "Listings", "description": "Products as edited in the admin dashboard."},
    {"name": "Dynamic Pages", "description": "Marketing content for storefront sections."},
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=(
        "Store administration API. "
        "Manage discounts, products, collections, categories, listings and "
        "storefront content."
    ),
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _validation_message(error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    message = error.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "error": "Validation failed",
            "details": [_validation_message(error) for error in exc.errors()],
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


app.include_router(discounts.router, prefix="/api/discounts", tags=["Discounts"])
app.include_router(products.router, prefix="/api/products", tags=["Products"])
app.include_router(collections.router, prefix="/api/collections", tags=["Collections"])
app.include_router(categories.router, prefix="/api/categories", tags=["Categories"])
app.include_router(listings.router, prefix="/api/listings", tags=["Listings"])
app.include_router(
    dynamic_pages.router,
    prefix="/api/dynamic-pages",
    tags=["Dynamic Pages"],
)


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
    }
