"""
Data models — users, documents (pages/posts), school entities, menus, PPDB, media, settings.
SQLAlchemy 2.0 ORM + str Enums.
"""
import uuid
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

import sqlalchemy as sa
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from .utils import utcnow


def _uuid() -> str:
    return str(uuid.uuid4())


# ── ENUMS ──────────────────────────────────────────────────────────────

class Role(str, Enum):
    SUPERADMIN = "SUPERADMIN"
    ADMIN      = "ADMIN"
    EDITOR     = "EDITOR"


class Status(str, Enum):
    DRAFT     = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED  = "ARCHIVED"


class ProgramType(str, Enum):
    CURRICULUM      = "CURRICULUM"
    EXTRACURRICULAR = "EXTRACURRICULAR"
    FEATURED        = "FEATURED"


class GalleryType(str, Enum):
    PHOTO = "PHOTO"
    VIDEO = "VIDEO"
    MIXED = "MIXED"


class EventType(str, Enum):
    ACADEMIC    = "ACADEMIC"
    HOLIDAY     = "HOLIDAY"
    EXAM        = "EXAM"
    CEREMONY    = "CEREMONY"
    COMPETITION = "COMPETITION"
    MEETING     = "MEETING"
    OTHER       = "OTHER"


class PPDBStatus(str, Enum):
    PENDING   = "PENDING"
    REVIEWING = "REVIEWING"
    ACCEPTED  = "ACCEPTED"
    REJECTED  = "REJECTED"
    ENROLLED  = "ENROLLED"
    WITHDRAWN = "WITHDRAWN"


class Gender(str, Enum):
    MALE   = "MALE"
    FEMALE = "FEMALE"


class SchoolLevel(str, Enum):
    PAUD = "PAUD"
    TK   = "TK"
    SD   = "SD"
    SMP  = "SMP"
    SMA  = "SMA"
    SMK  = "SMK"


# ── ORM ────────────────────────────────────────────────────────────────

class Base(DeclarativeBase):

    _hidden: tuple = ()

    def to_dict(self) -> Dict[str, Any]:
        """Column values, dates as ISO strings. Columns in `_hidden` are left out."""
        out = {}
        for col in self.__table__.columns:
            if col.key in self._hidden:
                continue
            val = getattr(self, col.key)
            if isinstance(val, (datetime, date)):
                val = val.isoformat()
            out[col.key] = val
        return out


post_tags = sa.Table(
    "post_tags", Base.metadata,
    sa.Column("post_id", sa.String, sa.ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    sa.Column("tag_id",  sa.String, sa.ForeignKey("tags.id",  ondelete="CASCADE"), primary_key=True),
)


class UserDB(Base):
    __tablename__ = "users"
    _hidden = ("password",)
    id:         Mapped[str]           = mapped_column(sa.String, primary_key=True, default=_uuid)
    name:       Mapped[str]           = mapped_column(sa.String, nullable=False)
    email:      Mapped[str]           = mapped_column(sa.String, unique=True, nullable=False)
    password:   Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    role:       Mapped[str]           = mapped_column(sa.String, default=Role.EDITOR.value)
    is_active:  Mapped[bool]          = mapped_column(sa.Boolean, default=True)
    image:      Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    created_at: Mapped[datetime]      = mapped_column(sa.DateTime, default=utcnow)
    updated_at: Mapped[datetime]      = mapped_column(sa.DateTime, default=utcnow, onupdate=utcnow)


class SchoolProfileDB(Base):
    __tablename__ = "school_profile"
    id:            Mapped[str]             = mapped_column(sa.String, primary_key=True, default="default")
    name:          Mapped[str]             = mapped_column(sa.String, nullable=False)
    tagline:       Mapped[Optional[str]]   = mapped_column(sa.String, nullable=True)
    logo:          Mapped[Optional[str]]   = mapped_column(sa.String, nullable=True)
    favicon:       Mapped[Optional[str]]   = mapped_column(sa.String, nullable=True)
    email:         Mapped[Optional[str]]   = mapped_column(sa.String, nullable=True)
    phone:         Mapped[Optional[str]]   = mapped_column(sa.String, nullable=True)
    whatsapp:      Mapped[Optional[str]]   = mapped_column(sa.String, nullable=True)
    address:       Mapped[Optional[str]]   = mapped_column(sa.Text, nullable=True)
    latitude:      Mapped[Optional[float]] = mapped_column(sa.Float, nullable=True)
    longitude:     Mapped[Optional[float]] = mapped_column(sa.Float, nullable=True)
    vision:        Mapped[Optional[str]]   = mapped_column(sa.Text, nullable=True)
    mission:       Mapped[Optional[str]]   = mapped_column(sa.Text, nullable=True)
    history:       Mapped[Optional[str]]   = mapped_column(sa.Text, nullable=True)
    accreditation: Mapped[Optional[str]]   = mapped_column(sa.String, nullable=True)
    npsn:          Mapped[Optional[str]]   = mapped_column(sa.String, nullable=True)
    founded_year:  Mapped[Optional[int]]   = mapped_column(sa.Integer, nullable=True)
    school_level:  Mapped[str]             = mapped_column(sa.String, default=SchoolLevel.SD.value)
    social_media:  Mapped[Optional[dict]]  = mapped_column(sa.JSON, nullable=True)
    updated_at:    Mapped[datetime]        = mapped_column(sa.DateTime, default=utcnow, onupdate=utcnow)


# ── Documents ──────────────────────────────────────────────────────────

class CategoryDB(Base):
    __tablename__ = "categories"
    id:          Mapped[str]           = mapped_column(sa.String, primary_key=True, default=_uuid)
    name:        Mapped[str]           = mapped_column(sa.String, nullable=False)
    slug:        Mapped[str]           = mapped_column(sa.String, unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    color:       Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    order:       Mapped[int]           = mapped_column(sa.Integer, default=0)
    created_at:  Mapped[datetime]      = mapped_column(sa.DateTime, default=utcnow)

    posts: Mapped[List["PostDB"]] = relationship("PostDB", back_populates="category")


class TagDB(Base):
    __tablename__ = "tags"
    id:   Mapped[str] = mapped_column(sa.String, primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(sa.String, nullable=False)
    slug: Mapped[str] = mapped_column(sa.String, unique=True, nullable=False)

    posts: Mapped[List["PostDB"]] = relationship("PostDB", secondary=post_tags, back_populates="tags")


class PageDB(Base):
    __tablename__ = "pages"
    id:           Mapped[str]                = mapped_column(sa.String, primary_key=True, default=_uuid)
    title:        Mapped[str]                = mapped_column(sa.String, nullable=False)
    slug:         Mapped[str]                = mapped_column(sa.String, unique=True, nullable=False)
    content:      Mapped[list]               = mapped_column(sa.JSON, default=list)
    excerpt:      Mapped[Optional[str]]      = mapped_column(sa.Text, nullable=True)
    featured_img: Mapped[Optional[str]]      = mapped_column(sa.String, nullable=True)
    status:       Mapped[str]                = mapped_column(sa.String, default=Status.DRAFT.value)
    template:     Mapped[str]                = mapped_column(sa.String, default="default")
    seo_title:    Mapped[Optional[str]]      = mapped_column(sa.String, nullable=True)
    seo_desc:     Mapped[Optional[str]]      = mapped_column(sa.String, nullable=True)
    seo_keywords: Mapped[Optional[str]]      = mapped_column(sa.String, nullable=True)
    og_image:     Mapped[Optional[str]]      = mapped_column(sa.String, nullable=True)
    locale:       Mapped[str]                = mapped_column(sa.String, default="id")
    order:        Mapped[int]                = mapped_column(sa.Integer, default=0)
    parent_id:    Mapped[Optional[str]]      = mapped_column(sa.String, sa.ForeignKey("pages.id"), nullable=True)
    author_id:    Mapped[Optional[str]]      = mapped_column(sa.String, sa.ForeignKey("users.id"), nullable=True)
    published_at: Mapped[Optional[datetime]] = mapped_column(sa.DateTime, nullable=True)
    created_at:   Mapped[datetime]           = mapped_column(sa.DateTime, default=utcnow)
    updated_at:   Mapped[datetime]           = mapped_column(sa.DateTime, default=utcnow, onupdate=utcnow)

    author:   Mapped[Optional["UserDB"]] = relationship("UserDB")
    parent:   Mapped[Optional["PageDB"]] = relationship("PageDB", remote_side="PageDB.id", back_populates="children")
    children: Mapped[List["PageDB"]]     = relationship("PageDB", back_populates="parent")


class PostDB(Base):
    __tablename__ = "posts"
    id:           Mapped[str]                = mapped_column(sa.String, primary_key=True, default=_uuid)
    title:        Mapped[str]                = mapped_column(sa.String, nullable=False)
    slug:         Mapped[str]                = mapped_column(sa.String, unique=True, nullable=False)
    content:      Mapped[list]               = mapped_column(sa.JSON, default=list)
    excerpt:      Mapped[Optional[str]]      = mapped_column(sa.Text, nullable=True)
    featured_img: Mapped[Optional[str]]      = mapped_column(sa.String, nullable=True)
    status:       Mapped[str]                = mapped_column(sa.String, default=Status.DRAFT.value)
    category_id:  Mapped[str]                = mapped_column(sa.String, sa.ForeignKey("categories.id"), nullable=False)
    author_id:    Mapped[Optional[str]]      = mapped_column(sa.String, sa.ForeignKey("users.id"), nullable=True)
    is_featured:  Mapped[bool]               = mapped_column(sa.Boolean, default=False)
    views:        Mapped[int]                = mapped_column(sa.Integer, default=0)
    seo_title:    Mapped[Optional[str]]      = mapped_column(sa.String, nullable=True)
    seo_desc:     Mapped[Optional[str]]      = mapped_column(sa.String, nullable=True)
    locale:       Mapped[str]                = mapped_column(sa.String, default="id")
    order:        Mapped[int]                = mapped_column(sa.Integer, default=0)
    published_at: Mapped[Optional[datetime]] = mapped_column(sa.DateTime, nullable=True)
    created_at:   Mapped[datetime]           = mapped_column(sa.DateTime, default=utcnow)
    updated_at:   Mapped[datetime]           = mapped_column(sa.DateTime, default=utcnow, onupdate=utcnow)

    category: Mapped["CategoryDB"]       = relationship("CategoryDB", back_populates="posts")
    author:   Mapped[Optional["UserDB"]] = relationship("UserDB")
    tags:     Mapped[List["TagDB"]]      = relationship("TagDB", secondary=post_tags, back_populates="posts")

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["category"] = {"id": self.category.id, "name": self.category.name,
                         "slug": self.category.slug, "color": self.category.color} if self.category else None
        d["tags"] = [{"id": t.id, "name": t.name, "slug": t.slug} for t in self.tags]
        return d


# ── School entities ────────────────────────────────────────────────────

class StaffDB(Base):
    __tablename__ = "staff"
    id:         Mapped[str]            = mapped_column(sa.String, primary_key=True, default=_uuid)
    name:       Mapped[str]            = mapped_column(sa.String, nullable=False)
    nip:        Mapped[Optional[str]]  = mapped_column(sa.String, nullable=True)
    position:   Mapped[str]            = mapped_column(sa.String, nullable=False)
    department: Mapped[Optional[str]]  = mapped_column(sa.String, nullable=True)
    bio:        Mapped[Optional[str]]  = mapped_column(sa.Text, nullable=True)
    photo:      Mapped[Optional[str]]  = mapped_column(sa.String, nullable=True)
    email:      Mapped[Optional[str]]  = mapped_column(sa.String, nullable=True)
    phone:      Mapped[Optional[str]]  = mapped_column(sa.String, nullable=True)
    education:  Mapped[Optional[str]]  = mapped_column(sa.String, nullable=True)
    is_teacher: Mapped[bool]           = mapped_column(sa.Boolean, default=False)
    subjects:   Mapped[Optional[list]] = mapped_column(sa.JSON, nullable=True)
    is_active:  Mapped[bool]           = mapped_column(sa.Boolean, default=True)
    order:      Mapped[int]            = mapped_column(sa.Integer, default=0)
    created_at: Mapped[datetime]       = mapped_column(sa.DateTime, default=utcnow)
    updated_at: Mapped[datetime]       = mapped_column(sa.DateTime, default=utcnow, onupdate=utcnow)


class ProgramDB(Base):
    __tablename__ = "programs"
    id:          Mapped[str]            = mapped_column(sa.String, primary_key=True, default=_uuid)
    name:        Mapped[str]            = mapped_column(sa.String, nullable=False)
    slug:        Mapped[str]            = mapped_column(sa.String, unique=True, nullable=False)
    type:        Mapped[str]            = mapped_column(sa.String, nullable=False)
    description: Mapped[Optional[str]]  = mapped_column(sa.Text, nullable=True)
    content:     Mapped[Optional[list]] = mapped_column(sa.JSON, nullable=True)
    image:       Mapped[Optional[str]]  = mapped_column(sa.String, nullable=True)
    icon:        Mapped[Optional[str]]  = mapped_column(sa.String, nullable=True)
    is_active:   Mapped[bool]           = mapped_column(sa.Boolean, default=True)
    order:       Mapped[int]            = mapped_column(sa.Integer, default=0)
    created_at:  Mapped[datetime]       = mapped_column(sa.DateTime, default=utcnow)
    updated_at:  Mapped[datetime]       = mapped_column(sa.DateTime, default=utcnow, onupdate=utcnow)


class FacilityDB(Base):
    __tablename__ = "facilities"
    id:           Mapped[str]            = mapped_column(sa.String, primary_key=True, default=_uuid)
    name:         Mapped[str]            = mapped_column(sa.String, nullable=False)
    slug:         Mapped[str]            = mapped_column(sa.String, unique=True, nullable=False)
    description:  Mapped[Optional[str]]  = mapped_column(sa.Text, nullable=True)
    images:       Mapped[Optional[list]] = mapped_column(sa.JSON, nullable=True)
    icon:         Mapped[Optional[str]]  = mapped_column(sa.String, nullable=True)
    features:     Mapped[Optional[list]] = mapped_column(sa.JSON, nullable=True)
    is_published: Mapped[bool]           = mapped_column(sa.Boolean, default=True)
    order:        Mapped[int]            = mapped_column(sa.Integer, default=0)
    created_at:   Mapped[datetime]       = mapped_column(sa.DateTime, default=utcnow)
    updated_at:   Mapped[datetime]       = mapped_column(sa.DateTime, default=utcnow, onupdate=utcnow)


class GalleryDB(Base):
    __tablename__ = "galleries"
    id:           Mapped[str]                = mapped_column(sa.String, primary_key=True, default=_uuid)
    title:        Mapped[str]                = mapped_column(sa.String, nullable=False)
    slug:         Mapped[str]                = mapped_column(sa.String, unique=True, nullable=False)
    description:  Mapped[Optional[str]]      = mapped_column(sa.Text, nullable=True)
    cover_image:  Mapped[Optional[str]]      = mapped_column(sa.String, nullable=True)
    type:         Mapped[str]                = mapped_column(sa.String, default=GalleryType.PHOTO.value)
    is_published: Mapped[bool]               = mapped_column(sa.Boolean, default=True)
    event_date:   Mapped[Optional[datetime]] = mapped_column(sa.DateTime, nullable=True)
    created_at:   Mapped[datetime]           = mapped_column(sa.DateTime, default=utcnow)
    updated_at:   Mapped[datetime]           = mapped_column(sa.DateTime, default=utcnow, onupdate=utcnow)

    items: Mapped[List["GalleryItemDB"]] = relationship(
        "GalleryItemDB", back_populates="gallery", cascade="all, delete-orphan",
        order_by="GalleryItemDB.order",
    )


class GalleryItemDB(Base):
    __tablename__ = "gallery_items"
    id:         Mapped[str]           = mapped_column(sa.String, primary_key=True, default=_uuid)
    gallery_id: Mapped[str]           = mapped_column(sa.String, sa.ForeignKey("galleries.id"), nullable=False)
    url:        Mapped[str]           = mapped_column(sa.String, nullable=False)
    thumbnail:  Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    caption:    Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    type:       Mapped[str]           = mapped_column(sa.String, default="image")
    order:      Mapped[int]           = mapped_column(sa.Integer, default=0)
    created_at: Mapped[datetime]      = mapped_column(sa.DateTime, default=utcnow)

    gallery: Mapped["GalleryDB"] = relationship("GalleryDB", back_populates="items")


class TestimonialDB(Base):
    __tablename__ = "testimonials"
    id:           Mapped[str]           = mapped_column(sa.String, primary_key=True, default=_uuid)
    name:         Mapped[str]           = mapped_column(sa.String, nullable=False)
    role:         Mapped[str]           = mapped_column(sa.String, nullable=False)
    content:      Mapped[str]           = mapped_column(sa.Text, nullable=False)
    photo:        Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    rating:       Mapped[int]           = mapped_column(sa.Integer, default=5)
    is_published: Mapped[bool]          = mapped_column(sa.Boolean, default=True)
    order:        Mapped[int]           = mapped_column(sa.Integer, default=0)
    created_at:   Mapped[datetime]      = mapped_column(sa.DateTime, default=utcnow)
    updated_at:   Mapped[datetime]      = mapped_column(sa.DateTime, default=utcnow, onupdate=utcnow)


class GradeLevelDB(Base):
    __tablename__ = "grade_levels"
    id:          Mapped[str]            = mapped_column(sa.String, primary_key=True, default=_uuid)
    name:        Mapped[str]            = mapped_column(sa.String, nullable=False)
    slug:        Mapped[str]            = mapped_column(sa.String, unique=True, nullable=False)
    description: Mapped[Optional[str]]  = mapped_column(sa.Text, nullable=True)
    age_range:   Mapped[Optional[str]]  = mapped_column(sa.String, nullable=True)
    min_age:     Mapped[Optional[int]]  = mapped_column(sa.Integer, nullable=True)
    max_age:     Mapped[Optional[int]]  = mapped_column(sa.Integer, nullable=True)
    quota:       Mapped[Optional[int]]  = mapped_column(sa.Integer, nullable=True)
    image:       Mapped[Optional[str]]  = mapped_column(sa.String, nullable=True)
    icon:        Mapped[Optional[str]]  = mapped_column(sa.String, nullable=True)
    features:    Mapped[Optional[list]] = mapped_column(sa.JSON, nullable=True)
    is_active:   Mapped[bool]           = mapped_column(sa.Boolean, default=True)
    order:       Mapped[int]            = mapped_column(sa.Integer, default=0)
    created_at:  Mapped[datetime]       = mapped_column(sa.DateTime, default=utcnow)
    updated_at:  Mapped[datetime]       = mapped_column(sa.DateTime, default=utcnow, onupdate=utcnow)


class EventDB(Base):
    __tablename__ = "events"
    id:           Mapped[str]                = mapped_column(sa.String, primary_key=True, default=_uuid)
    title:        Mapped[str]                = mapped_column(sa.String, nullable=False)
    slug:         Mapped[str]                = mapped_column(sa.String, unique=True, nullable=False)
    description:  Mapped[Optional[str]]      = mapped_column(sa.Text, nullable=True)
    content:      Mapped[Optional[list]]     = mapped_column(sa.JSON, nullable=True)
    location:     Mapped[Optional[str]]      = mapped_column(sa.String, nullable=True)
    start_date:   Mapped[datetime]           = mapped_column(sa.DateTime, nullable=False)
    end_date:     Mapped[Optional[datetime]] = mapped_column(sa.DateTime, nullable=True)
    is_all_day:   Mapped[bool]               = mapped_column(sa.Boolean, default=False)
    image:        Mapped[Optional[str]]      = mapped_column(sa.String, nullable=True)
    type:         Mapped[str]                = mapped_column(sa.String, default=EventType.ACADEMIC.value)
    color:        Mapped[Optional[str]]      = mapped_column(sa.String, nullable=True)
    is_published: Mapped[bool]               = mapped_column(sa.Boolean, default=True)
    created_at:   Mapped[datetime]           = mapped_column(sa.DateTime, default=utcnow)
    updated_at:   Mapped[datetime]           = mapped_column(sa.DateTime, default=utcnow, onupdate=utcnow)


class AchievementDB(Base):
    __tablename__ = "achievements"
    id:           Mapped[str]                = mapped_column(sa.String, primary_key=True, default=_uuid)
    title:        Mapped[str]                = mapped_column(sa.String, nullable=False)
    description:  Mapped[Optional[str]]      = mapped_column(sa.Text, nullable=True)
    category:     Mapped[Optional[str]]      = mapped_column(sa.String, nullable=True)
    level:        Mapped[Optional[str]]      = mapped_column(sa.String, nullable=True)
    date:         Mapped[Optional[datetime]] = mapped_column(sa.DateTime, nullable=True)
    image:        Mapped[Optional[str]]      = mapped_column(sa.String, nullable=True)
    participants: Mapped[Optional[str]]      = mapped_column(sa.Text, nullable=True)
    is_published: Mapped[bool]               = mapped_column(sa.Boolean, default=True)
    order:        Mapped[int]                = mapped_column(sa.Integer, default=0)
    created_at:   Mapped[datetime]           = mapped_column(sa.DateTime, default=utcnow)
    updated_at:   Mapped[datetime]           = mapped_column(sa.DateTime, default=utcnow, onupdate=utcnow)


class AlumniDB(Base):
    __tablename__ = "alumni"
    id:              Mapped[str]            = mapped_column(sa.String, primary_key=True, default=_uuid)
    name:            Mapped[str]            = mapped_column(sa.String, nullable=False)
    graduation_year: Mapped[int]            = mapped_column(sa.Integer, nullable=False)
    photo:           Mapped[Optional[str]]  = mapped_column(sa.String, nullable=True)
    current_status:  Mapped[Optional[str]]  = mapped_column(sa.String, nullable=True)
    company:         Mapped[Optional[str]]  = mapped_column(sa.String, nullable=True)
    achievement:     Mapped[Optional[str]]  = mapped_column(sa.Text, nullable=True)
    testimonial:     Mapped[Optional[str]]  = mapped_column(sa.Text, nullable=True)
    social_media:    Mapped[Optional[dict]] = mapped_column(sa.JSON, nullable=True)
    is_published:    Mapped[bool]           = mapped_column(sa.Boolean, default=True)
    created_at:      Mapped[datetime]       = mapped_column(sa.DateTime, default=utcnow)
    updated_at:      Mapped[datetime]       = mapped_column(sa.DateTime, default=utcnow, onupdate=utcnow)


class DownloadDB(Base):
    __tablename__ = "downloads"
    id:             Mapped[str]           = mapped_column(sa.String, primary_key=True, default=_uuid)
    title:          Mapped[str]           = mapped_column(sa.String, nullable=False)
    description:    Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    file:           Mapped[str]           = mapped_column(sa.String, nullable=False)
    file_name:      Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    file_size:      Mapped[Optional[int]] = mapped_column(sa.Integer, nullable=True)
    file_type:      Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    category:       Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    download_count: Mapped[int]           = mapped_column(sa.Integer, default=0)
    is_published:   Mapped[bool]          = mapped_column(sa.Boolean, default=True)
    order:          Mapped[int]           = mapped_column(sa.Integer, default=0)
    created_at:     Mapped[datetime]      = mapped_column(sa.DateTime, default=utcnow)
    updated_at:     Mapped[datetime]      = mapped_column(sa.DateTime, default=utcnow, onupdate=utcnow)


class AnnouncementDB(Base):
    __tablename__ = "announcements"
    id:            Mapped[str]                 = mapped_column(sa.String, primary_key=True, default=_uuid)
    title:         Mapped[str]                 = mapped_column(sa.String, nullable=False)
    content:       Mapped[str]                 = mapped_column(sa.Text, nullable=False)
    type:          Mapped[str]                 = mapped_column(sa.String, default="info")
    link:          Mapped[Optional[str]]       = mapped_column(sa.String, nullable=True)
    link_text:     Mapped[Optional[str]]       = mapped_column(sa.String, nullable=True)
    start_date:    Mapped[Optional[datetime]]  = mapped_column(sa.DateTime, nullable=True)
    end_date:      Mapped[Optional[datetime]]  = mapped_column(sa.DateTime, nullable=True)
    is_active:     Mapped[bool]                = mapped_column(sa.Boolean, default=True)
    show_on_pages: Mapped[Optional[list]]      = mapped_column(sa.JSON, nullable=True)
    order:         Mapped[int]                 = mapped_column(sa.Integer, default=0)
    created_at:    Mapped[datetime]            = mapped_column(sa.DateTime, default=utcnow)
    updated_at:    Mapped[datetime]            = mapped_column(sa.DateTime, default=utcnow, onupdate=utcnow)


# ── Menus ──────────────────────────────────────────────────────────────

class MenuDB(Base):
    __tablename__ = "menus"
    id:         Mapped[str]      = mapped_column(sa.String, primary_key=True, default=_uuid)
    name:       Mapped[str]      = mapped_column(sa.String, nullable=False)
    location:   Mapped[str]      = mapped_column(sa.String, unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(sa.DateTime, default=utcnow)

    items: Mapped[List["MenuItemDB"]] = relationship("MenuItemDB", back_populates="menu", cascade="all, delete-orphan")


class MenuItemDB(Base):
    __tablename__ = "menu_items"
    id:         Mapped[str]           = mapped_column(sa.String, primary_key=True, default=_uuid)
    menu_id:    Mapped[str]           = mapped_column(sa.String, sa.ForeignKey("menus.id"), nullable=False)
    label:      Mapped[str]           = mapped_column(sa.String, nullable=False)
    url:        Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    page_slug:  Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    type:       Mapped[str]           = mapped_column(sa.String, default="link")
    parent_id:  Mapped[Optional[str]] = mapped_column(sa.String, sa.ForeignKey("menu_items.id"), nullable=True)
    order:      Mapped[int]           = mapped_column(sa.Integer, default=0)
    is_visible: Mapped[bool]          = mapped_column(sa.Boolean, default=True)
    open_new:   Mapped[bool]          = mapped_column(sa.Boolean, default=False)
    icon:       Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    css_class:  Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)

    menu:     Mapped["MenuDB"]               = relationship("MenuDB", back_populates="items")
    parent:   Mapped[Optional["MenuItemDB"]] = relationship("MenuItemDB", remote_side="MenuItemDB.id", back_populates="children")
    children: Mapped[List["MenuItemDB"]]     = relationship("MenuItemDB", back_populates="parent", order_by="MenuItemDB.order")


# ── PPDB ───────────────────────────────────────────────────────────────

class PPDBPeriodDB(Base):
    __tablename__ = "ppdb_periods"
    id:            Mapped[str]            = mapped_column(sa.String, primary_key=True, default=_uuid)
    name:          Mapped[str]            = mapped_column(sa.String, nullable=False)
    academic_year: Mapped[str]            = mapped_column(sa.String, nullable=False)
    description:   Mapped[Optional[str]]  = mapped_column(sa.Text, nullable=True)
    start_date:    Mapped[datetime]       = mapped_column(sa.DateTime, nullable=False)
    end_date:      Mapped[datetime]       = mapped_column(sa.DateTime, nullable=False)
    quota:         Mapped[Optional[int]]  = mapped_column(sa.Integer, nullable=True)
    requirements:  Mapped[Optional[list]] = mapped_column(sa.JSON, nullable=True)
    stages:        Mapped[Optional[list]] = mapped_column(sa.JSON, nullable=True)
    form_fields:   Mapped[Optional[list]] = mapped_column(sa.JSON, nullable=True)
    is_active:     Mapped[bool]           = mapped_column(sa.Boolean, default=False)
    created_at:    Mapped[datetime]       = mapped_column(sa.DateTime, default=utcnow)
    updated_at:    Mapped[datetime]       = mapped_column(sa.DateTime, default=utcnow, onupdate=utcnow)

    registrations: Mapped[List["PPDBRegistrationDB"]] = relationship("PPDBRegistrationDB", back_populates="period")


class PPDBRegistrationDB(Base):
    __tablename__ = "ppdb_registrations"
    id:                  Mapped[str]           = mapped_column(sa.String, primary_key=True, default=_uuid)
    registration_number: Mapped[str]           = mapped_column(sa.String, unique=True, nullable=False)
    period_id:           Mapped[str]           = mapped_column(sa.String, sa.ForeignKey("ppdb_periods.id"), nullable=False)
    student_name:        Mapped[str]           = mapped_column(sa.String, nullable=False)
    nisn:                Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    birth_place:         Mapped[str]           = mapped_column(sa.String, nullable=False)
    birth_date:          Mapped[date]          = mapped_column(sa.Date, nullable=False)
    gender:              Mapped[str]           = mapped_column(sa.String, nullable=False)
    religion:            Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    address:             Mapped[str]           = mapped_column(sa.Text, nullable=False)
    previous_school:     Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    father_name:         Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    father_job:          Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    father_phone:        Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    mother_name:         Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    mother_job:          Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    mother_phone:        Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    guardian_name:       Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    guardian_phone:      Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    guardian_email:      Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    status:              Mapped[str]           = mapped_column(sa.String, default=PPDBStatus.PENDING.value)
    notes:               Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    created_at:          Mapped[datetime]      = mapped_column(sa.DateTime, default=utcnow)
    updated_at:          Mapped[datetime]      = mapped_column(sa.DateTime, default=utcnow, onupdate=utcnow)

    period: Mapped["PPDBPeriodDB"] = relationship("PPDBPeriodDB", back_populates="registrations")


# ── Media / settings / contact ─────────────────────────────────────────

class MediaDB(Base):
    __tablename__ = "media"
    id:          Mapped[str]           = mapped_column(sa.String, primary_key=True, default=_uuid)
    name:        Mapped[str]           = mapped_column(sa.String, nullable=False)
    url:         Mapped[str]           = mapped_column(sa.String, nullable=False)
    storage:     Mapped[str]           = mapped_column(sa.String, default="local")
    storage_key: Mapped[str]           = mapped_column(sa.String, nullable=False)
    type:        Mapped[str]           = mapped_column(sa.String, default="other")
    mime_type:   Mapped[str]           = mapped_column(sa.String, nullable=False)
    size:        Mapped[int]           = mapped_column(sa.Integer, default=0)
    width:       Mapped[Optional[int]] = mapped_column(sa.Integer, nullable=True)
    height:      Mapped[Optional[int]] = mapped_column(sa.Integer, nullable=True)
    alt:         Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    folder:      Mapped[str]           = mapped_column(sa.String, default="general")
    created_at:  Mapped[datetime]      = mapped_column(sa.DateTime, default=utcnow)


class SettingDB(Base):
    __tablename__ = "settings"
    id:         Mapped[str]      = mapped_column(sa.String, primary_key=True, default=_uuid)
    key:        Mapped[str]      = mapped_column(sa.String, unique=True, nullable=False)
    value:      Mapped[Any]      = mapped_column(sa.JSON, nullable=True)
    group:      Mapped[str]      = mapped_column(sa.String, default="general")
    updated_at: Mapped[datetime] = mapped_column(sa.DateTime, default=utcnow, onupdate=utcnow)


class ContactMessageDB(Base):
    __tablename__ = "contact_messages"
    id:         Mapped[str]           = mapped_column(sa.String, primary_key=True, default=_uuid)
    name:       Mapped[str]           = mapped_column(sa.String, nullable=False)
    email:      Mapped[str]           = mapped_column(sa.String, nullable=False)
    phone:      Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    subject:    Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    message:    Mapped[str]           = mapped_column(sa.Text, nullable=False)
    is_read:    Mapped[bool]          = mapped_column(sa.Boolean, default=False)
    created_at: Mapped[datetime]      = mapped_column(sa.DateTime, default=utcnow)
