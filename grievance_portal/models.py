# Enums and pydantic models shared by the triage pipeline, dashboard and API

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class _LabelledEnum(str, Enum):
    """String enum that also accepts its human label, case-insensitively."""

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if key in (member.value, member.label.lower()):
                    return member
        return None

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class Urgency(_LabelledEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Category(_LabelledEnum):
    ENVIRONMENTAL = "environmental"
    LAND_DISPUTE = "land_dispute"
    RESETTLEMENT = "resettlement"
    LABOR_ISSUE = "labor_issue"
    HEALTH_SAFETY = "health_safety"
    ASSET_DAMAGE_LOSS = "asset_damage_loss"
    ACCESS = "access"
    TRAFFIC = "traffic"
    NOISE = "noise"
    OTHER = "other"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self.value]


CATEGORY_LABELS = {
    "environmental": "Environmental",
    "land_dispute": "Land Dispute",
    "resettlement": "Resettlement",
    "labor_issue": "Labor Issue",
    "health_safety": "Health & Safety",
    "asset_damage_loss": "Asset Damage/Loss",
    "access": "Access",
    "traffic": "Traffic",
    "noise": "Noise",
    "other": "Other",
}

# Categories shown as bars on the dashboard
HEADLINE_CATEGORIES = [
    Category.ENVIRONMENTAL, Category.LAND_DISPUTE, Category.LABOR_ISSUE,
    Category.HEALTH_SAFETY, Category.OTHER,
]


class LocationMethod(str, Enum):
    BROWSER_AUTO = "browser_auto"
    MANUAL = "manual"


class Language(str, Enum):
    ENGLISH = "English"
    AFRIKAANS = "Afrikaans"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if key in (member.value.lower(), member.code):
                    return member
        return None

    @property
    def code(self) -> str:
        return {"English": "en", "Afrikaans": "af"}[self.value]


class GrievanceStatus(str, Enum):
    NEW = "new"


# ---------------------------------------------------------------------------
# Pydantic Models
# ---------------------------------------------------------------------------
class GrievanceCreate(BaseModel):
    """Raw form payload as posted by the submission screen."""
    language: Language = Language.ENGLISH
    name: str = Field("", max_length=200)
    contact: str = Field("", max_length=320)
    location_text: str = Field("", max_length=500)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    description: str = ""
    category: Optional[Category] = None

    @field_validator("category", mode="before")
    @classmethod
    def blank_category(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class GrievanceRecord(BaseModel):
    id: str
    submitted_language: Language = Language.ENGLISH
    submitter_name: Optional[str] = None
    submitter_contact: Optional[str] = None
    location_text: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location_method: Optional[LocationMethod] = None
    content: str
    category: Category = Category.OTHER
    urgency: Urgency
    status: str = GrievanceStatus.NEW.value
    created_at: datetime
    updated_at: datetime


class SubmissionResponse(BaseModel):
    id: str
    message: str
    grievance: GrievanceRecord


class CategoryStat(BaseModel):
    name: str
    value: Category
    count: int
    percentage: float


class SummaryResponse(BaseModel):
    total: int
    count_by_urgency: Dict[str, int]
    count_by_category: Dict[str, int]
    percentage_by_category: Dict[str, float]
    categories: List[CategoryStat]


class DashboardResponse(BaseModel):
    filters: Dict[str, Optional[str]]
    has_active_filters: bool
    summary: SummaryResponse
    grievances: List[GrievanceRecord]
