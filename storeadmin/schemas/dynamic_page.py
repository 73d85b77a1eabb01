"""Dynamic page schemas."""

from datetime import datetime
from typing import Any
from uuid import UUID

from storeadmin.models.dynamic_page import DynamicPageSection
from storeadmin.schemas.base import CamelModel


class DynamicPageFields(CamelModel):
    title: str | None = None
    subtitle: str | None = None
    description: str | None = None
    button_text: str | None = None
    desktop_image: str | None = None
    mobile_image: str | None = None
    image: str | None = None
    video_source: str | None = None
    designer_image: str | None = None
    banner_image: str | None = None
    interior_image: str | None = None
    paragraph1: str | None = None
    paragraph2: str | None = None
    designer_quote: str | None = None
    paragraph_texts: list[str] | None = None
    meta_data: dict[str, Any] | None = None


class DynamicPageCreate(DynamicPageFields):
    # Required, reported as "Section is required" by the router
    section: DynamicPageSection | None = None
    is_active: bool = True
    sort_order: int = 0


class DynamicPageUpdate(DynamicPageFields):
    section: DynamicPageSection | None = None
    is_active: bool | None = None
    sort_order: int | None = None


class DynamicPageResponse(DynamicPageFields):
    id: UUID
    section: str
    is_active: bool
    sort_order: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
