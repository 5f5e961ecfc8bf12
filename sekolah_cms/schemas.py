"""
Input schemas (Pydantic v2) — one model per writable entity.
Services validate raw dicts against these; updates re-validate the merged
record so cross-field rules keep holding.
"""
import re
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from .models import (
    EventType, GalleryType, Gender, PPDBStatus, ProgramType, Role, SchoolLevel, Status,
)
from .utils import SLUG_RE

ACADEMIC_YEAR_RE = re.compile(r"^\d{4}/\d{4}$")
MENU_ITEM_TYPES = ("link", "page", "dropdown", "megamenu")


class _Input(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore", use_enum_values=True, validate_default=True)

    @model_validator(mode="after")
    def _naive_utc(self):
        # stored timestamps are naive UTC
        for name in type(self).model_fields:
            v = getattr(self, name)
            if isinstance(v, datetime) and v.tzinfo is not None:
                object.__setattr__(self, name, v.astimezone(timezone.utc).replace(tzinfo=None))
        return self


def _check_slug(v: str) -> str:
    if not SLUG_RE.match(v or ""):
        raise ValueError("Slug hanya boleh berisi huruf kecil, angka, dan tanda hubung")
    return v


def _required(v: Optional[str], message: str) -> str:
    if not v:
        raise ValueError(message)
    return v


# ── Documents ──────────────────────────────────────────────────────────

class PageInput(_Input):
    title:        str
    slug:         str
    content:      List[Dict[str, Any]] = []
    excerpt:      Optional[str]        = None
    featured_img: Optional[str]        = None
    status:       Status               = Status.DRAFT
    template:     str                  = "default"
    seo_title:    Optional[str]        = Field(None, max_length=70)
    seo_desc:     Optional[str]        = Field(None, max_length=160)
    seo_keywords: Optional[str]        = None
    og_image:     Optional[str]        = None
    locale:       str                  = "id"
    parent_id:    Optional[str]        = None
    order:        int                  = 0

    @field_validator("title")
    @classmethod
    def _title(cls, v):
        return _required(v, "Judul wajib diisi")

    @field_validator("slug")
    @classmethod
    def _slug(cls, v):
        return _check_slug(v)


class PostInput(_Input):
    title:        str
    slug:         str
    content:      List[Dict[str, Any]] = []
    excerpt:      Optional[str]        = None
    featured_img: Optional[str]        = None
    status:       Status               = Status.DRAFT
    category_id:  str
    tag_ids:      List[str]            = []
    is_featured:  bool                 = False
    seo_title:    Optional[str]        = Field(None, max_length=70)
    seo_desc:     Optional[str]        = Field(None, max_length=160)
    locale:       str                  = "id"

    @field_validator("title")
    @classmethod
    def _title(cls, v):
        return _required(v, "Judul wajib diisi")

    @field_validator("slug")
    @classmethod
    def _slug(cls, v):
        return _check_slug(v)

    @field_validator("category_id")
    @classmethod
    def _category(cls, v):
        return _required(v, "Kategori wajib dipilih")


class CategoryInput(_Input):
    name:        str
    slug:        str
    description: Optional[str] = None
    color:       Optional[str] = None
    order:       int           = 0

    @field_validator("slug")
    @classmethod
    def _slug(cls, v):
        return _check_slug(v)


class TagInput(_Input):
    name: str
    slug: str

    @field_validator("slug")
    @classmethod
    def _slug(cls, v):
        return _check_slug(v)


class ReorderItem(BaseModel):
    id:        str
    order:     int
    parent_id: Optional[str] = None


# ── School entities ────────────────────────────────────────────────────

class StaffInput(_Input):
    name:       str
    nip:        Optional[str]       = None
    position:   str
    department: Optional[str]       = None
    bio:        Optional[str]       = None
    photo:      Optional[str]       = None
    email:      Optional[EmailStr]  = None
    phone:      Optional[str]       = None
    education:  Optional[str]       = None
    is_teacher: bool                = False
    subjects:   Optional[List[str]] = None
    is_active:  bool                = True
    order:      int                 = 0

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email(cls, v):
        return v or None


class ProgramInput(_Input):
    name:        str
    slug:        str
    type:        ProgramType
    description: Optional[str]                  = None
    content:     Optional[List[Dict[str, Any]]] = None
    image:       Optional[str]                  = None
    icon:        Optional[str]                  = None
    is_active:   bool                           = True
    order:       int                            = 0

    @field_validator("slug")
    @classmethod
    def _slug(cls, v):
        return _check_slug(v)


class FacilityInput(_Input):
    name:         str
    slug:         str
    description:  Optional[str]       = None
    images:       Optional[List[str]] = None
    icon:         Optional[str]       = None
    features:     Optional[List[str]] = None
    is_published: bool                = True
    order:        int                 = 0

    @field_validator("slug")
    @classmethod
    def _slug(cls, v):
        return _check_slug(v)


class GalleryInput(_Input):
    title:        str
    slug:         str
    description:  Optional[str]      = None
    cover_image:  Optional[str]      = None
    type:         GalleryType        = GalleryType.PHOTO
    is_published: bool               = True
    event_date:   Optional[datetime] = None

    @field_validator("slug")
    @classmethod
    def _slug(cls, v):
        return _check_slug(v)


class GalleryItemInput(_Input):
    url:       str
    thumbnail: Optional[str] = None
    caption:   Optional[str] = None
    type:      str           = "image"


class TestimonialInput(_Input):
    name:         str
    role:         str
    content:      str
    photo:        Optional[str] = None
    rating:       int           = Field(5, ge=1, le=5)
    is_published: bool          = True
    order:        int           = 0


class GradeLevelInput(_Input):
    name:        str
    slug:        str
    description: Optional[str]       = None
    age_range:   Optional[str]       = None
    min_age:     Optional[int]       = Field(None, ge=0)
    max_age:     Optional[int]       = Field(None, ge=0)
    quota:       Optional[int]       = Field(None, ge=0)
    image:       Optional[str]       = None
    icon:        Optional[str]       = None
    features:    Optional[List[str]] = None
    is_active:   bool                = True
    order:       int                 = 0

    @field_validator("slug")
    @classmethod
    def _slug(cls, v):
        return _check_slug(v)


class EventInput(_Input):
    title:        str
    slug:         str
    description:  Optional[str]                  = None
    content:      Optional[List[Dict[str, Any]]] = None
    location:     Optional[str]                  = None
    start_date:   datetime
    end_date:     Optional[datetime]             = None
    is_all_day:   bool                           = False
    image:        Optional[str]                  = None
    type:         EventType                      = EventType.ACADEMIC
    color:        Optional[str]                  = None
    is_published: bool                           = True

    @field_validator("slug")
    @classmethod
    def _slug(cls, v):
        return _check_slug(v)

    @model_validator(mode="after")
    def _range(self):
        if self.end_date and self.end_date < self.start_date:
            raise ValueError("Tanggal selesai harus setelah tanggal mulai")
        return self


class AchievementInput(_Input):
    title:        str
    description:  Optional[str]      = None
    category:     Optional[str]      = None
    level:        Optional[str]      = None
    date:         Optional[datetime] = None
    image:        Optional[str]      = None
    participants: Optional[str]      = None
    is_published: bool               = True
    order:        int                = 0


class AlumniInput(_Input):
    name:            str
    graduation_year: int                      = Field(..., ge=1900, le=2100)
    photo:           Optional[str]            = None
    current_status:  Optional[str]            = None
    company:         Optional[str]            = None
    achievement:     Optional[str]            = None
    testimonial:     Optional[str]            = None
    social_media:    Optional[Dict[str, str]] = None
    is_published:    bool                     = True


class DownloadInput(_Input):
    title:        str
    description:  Optional[str] = None
    file:         str
    file_name:    Optional[str] = None
    file_size:    Optional[int] = None
    file_type:    Optional[str] = None
    category:     Optional[str] = None
    is_published: bool          = True
    order:        int           = 0


ANNOUNCEMENT_TYPES = ("info", "warning", "success", "error")


class AnnouncementInput(_Input):
    title:         str                 = Field(..., max_length=200)
    content:       str                 = Field(..., max_length=1000)
    type:          str                 = "info"
    link:          Optional[str]       = None
    link_text:     Optional[str]       = Field(None, max_length=50)
    start_date:    Optional[datetime]  = None
    end_date:      Optional[datetime]  = None
    is_active:     bool                = True
    show_on_pages: Optional[List[str]] = None
    order:         int                 = Field(0, ge=0)

    @field_validator("title")
    @classmethod
    def _title(cls, v):
        return _required(v, "Judul diperlukan")

    @field_validator("content")
    @classmethod
    def _content(cls, v):
        return _required(v, "Konten diperlukan")

    @field_validator("type")
    @classmethod
    def _type(cls, v):
        if v not in ANNOUNCEMENT_TYPES:
            raise ValueError("Tipe pengumuman tidak valid")
        return v

    @field_validator("link")
    @classmethod
    def _link(cls, v):
        if v and not v.startswith(("http://", "https://", "/")):
            raise ValueError("Link tidak valid")
        return v or None

    @model_validator(mode="after")
    def _range(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("Tanggal selesai harus setelah tanggal mulai")
        return self


# ── Menus ──────────────────────────────────────────────────────────────

class MenuInput(_Input):
    name:     str
    location: str

    @field_validator("location")
    @classmethod
    def _location(cls, v):
        return _required(v, "Lokasi menu wajib diisi")


class MenuItemInput(_Input):
    menu_id:    str
    label:      str
    url:        Optional[str] = None
    page_slug:  Optional[str] = None
    type:       str           = "link"
    parent_id:  Optional[str] = None
    is_visible: bool          = True
    open_new:   bool          = False
    icon:       Optional[str] = None
    css_class:  Optional[str] = None

    @field_validator("type")
    @classmethod
    def _type(cls, v):
        if v not in MENU_ITEM_TYPES:
            raise ValueError("Tipe item menu tidak valid")
        return v


# ── PPDB ───────────────────────────────────────────────────────────────

class PPDBPeriodInput(_Input):
    name:          str
    academic_year: str
    description:   Optional[str]                  = None
    start_date:    datetime
    end_date:      datetime
    quota:         Optional[int]                  = Field(None, ge=0)
    requirements:  Optional[List[str]]            = None
    stages:        Optional[List[Dict[str, Any]]] = None
    form_fields:   Optional[List[Dict[str, Any]]] = None
    is_active:     bool                           = False

    @field_validator("academic_year")
    @classmethod
    def _year(cls, v):
        if not ACADEMIC_YEAR_RE.match(v or ""):
            raise ValueError("Format tahun ajaran harus YYYY/YYYY")
        return v

    @model_validator(mode="after")
    def _range(self):
        if self.end_date < self.start_date:
            raise ValueError("Tanggal selesai harus setelah tanggal mulai")
        return self


class PPDBRegistrationInput(_Input):
    student_name:    str
    nisn:            Optional[str]      = None
    birth_place:     str
    birth_date:      date
    gender:          Gender
    religion:        Optional[str]      = None
    address:         str
    previous_school: Optional[str]      = None
    father_name:     Optional[str]      = None
    father_job:      Optional[str]      = None
    father_phone:    Optional[str]      = None
    mother_name:     Optional[str]      = None
    mother_job:      Optional[str]      = None
    mother_phone:    Optional[str]      = None
    guardian_name:   Optional[str]      = None
    guardian_phone:  Optional[str]      = None
    guardian_email:  Optional[EmailStr] = None

    @field_validator("student_name")
    @classmethod
    def _name(cls, v):
        if len(v or "") < 3:
            raise ValueError("Nama siswa minimal 3 karakter")
        return v

    @field_validator("nisn")
    @classmethod
    def _nisn(cls, v):
        if v and not re.fullmatch(r"\d{10}", v):
            raise ValueError("NISN harus 10 digit angka")
        return v or None

    @field_validator("guardian_email", mode="before")
    @classmethod
    def _blank_email(cls, v):
        return v or None


class RegistrationStatusInput(_Input):
    status: PPDBStatus
    notes:  Optional[str] = None


# ── Settings / profile / contact / users ───────────────────────────────

class SettingInput(_Input):
    key:   str
    value: Any = None
    group: str = "general"

    @field_validator("key")
    @classmethod
    def _key(cls, v):
        return _required(v, "Key pengaturan wajib diisi")


class SchoolProfileInput(_Input):
    name:          str
    tagline:       Optional[str]            = None
    logo:          Optional[str]            = None
    favicon:       Optional[str]            = None
    email:         Optional[EmailStr]       = None
    phone:         Optional[str]            = None
    whatsapp:      Optional[str]            = None
    address:       Optional[str]            = None
    latitude:      Optional[float]          = Field(None, ge=-90, le=90)
    longitude:     Optional[float]          = Field(None, ge=-180, le=180)
    vision:        Optional[str]            = None
    mission:       Optional[str]            = None
    history:       Optional[str]            = None
    accreditation: Optional[str]            = None
    npsn:          Optional[str]            = None
    founded_year:  Optional[int]            = None
    school_level:  SchoolLevel              = SchoolLevel.SD
    social_media:  Optional[Dict[str, str]] = None

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email(cls, v):
        return v or None


class ContactInput(_Input):
    name:    str
    email:   EmailStr
    phone:   Optional[str] = None
    subject: Optional[str] = None
    message: str

    @field_validator("name")
    @classmethod
    def _name(cls, v):
        if len(v or "") < 2:
            raise ValueError("Nama minimal 2 karakter")
        return v

    @field_validator("message")
    @classmethod
    def _message(cls, v):
        if len(v or "") < 10:
            raise ValueError("Pesan minimal 10 karakter")
        return v


class UserInput(_Input):
    name:      str
    email:     EmailStr
    password:  Optional[str] = None
    role:      Role          = Role.EDITOR
    is_active: bool          = True
    image:     Optional[str] = None

    @field_validator("password")
    @classmethod
    def _password(cls, v):
        if v and len(v) < 8:
            raise ValueError("Password minimal 8 karakter")
        return v or None


class LoginInput(_Input):
    email:    EmailStr
    password: str
