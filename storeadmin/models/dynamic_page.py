"""Dynamic marketing content sections."""

from enum import Enum

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text, func

from storeadmin.core.database import Base
from storeadmin.models.shared import UUIDType, generate_uuid


class DynamicPageSection(str, Enum):
    HERO = "HERO"
    ABOUT = "ABOUT"
    CUSTOM_PAINTING = "CUSTOM_PAINTING"
    MEET_THE_ARTIST = "MEET_THE_ARTIST"
    VIDEO_SHOWCASE = "VIDEO_SHOWCASE"
    PAGE_HEADER = "PAGE_HEADER"


class DynamicPage(Base):
    """A content block rendered into one storefront section."""

    __tablename__ = "dynamic_pages"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    section = Column(String(50), nullable=False, index=True)
    title = Column(String(255), nullable=True)
    subtitle = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    button_text = Column(String(100), nullable=True)

    desktop_image = Column(String(1024), nullable=True)
    mobile_image = Column(String(1024), nullable=True)
    image = Column(String(1024), nullable=True)
    video_source = Column(String(1024), nullable=True)
    designer_image = Column(String(1024), nullable=True)
    banner_image = Column(String(1024), nullable=True)
    interior_image = Column(String(1024), nullable=True)

    paragraph1 = Column(Text, nullable=True)
    paragraph2 = Column(Text, nullable=True)
    designer_quote = Column(Text, nullable=True)
    paragraph_texts = Column(JSON, nullable=True)
    meta_data = Column(JSON, nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
