from enum import Enum
from typing import Optional, Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError
from pydantic.alias_generators import to_camel

RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


# --- Localized values (en / om / am) ---

class LocalizedText(CamelModel):
    en: str = ""
    om: str = ""
    am: str = ""


class LocalizedName(LocalizedText):
    en: RequiredText


class LocalizedList(CamelModel):
    en: list[str] = []
    om: list[str] = []
    am: list[str] = []


# --- Statuses ---

class SubmissionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class CommentStatus(str, Enum):
    UNREAD = "unread"
    READ = "read"
    REPLIED = "replied"


# --- Create payloads ---

class Treatment(CamelModel):
    chemical_id: RequiredText
    chemical_name: str = ""
    dosage: str = ""
    safety_instructions: LocalizedText = LocalizedText()
    application_method: Optional[str] = None


class DiseaseCreate(CamelModel):
    name: LocalizedName
    crop_type: RequiredText
    category_id: Optional[str] = None
    featured: bool = False
    images: list[str] = []
    symptoms: LocalizedList = LocalizedList()
    treatments: list[Treatment] = []


class ChemicalCreate(CamelModel):
    name: RequiredText
    type: RequiredText
    active_ingredient: str = ""
    dosage: str = ""
    safety_instructions: LocalizedText = LocalizedText()


class MarketChemical(CamelModel):
    chemical_id: RequiredText
    chemical_name: str = ""
    price: float = Field(0, ge=0)
    available: bool = True
    last_updated: Optional[str] = None


class MarketCreate(CamelModel):
    name: RequiredText
    location: RequiredText
    region: str = ""
    chemicals: list[MarketChemical] = []


class DiseaseCategoryCreate(CamelModel):
    name: LocalizedName
    description: LocalizedName
    color: str = "#6B7280"
    icon: str = "Folder"


class PendingSubmissionCreate(CamelModel):
    user_id: RequiredText
    image_url: RequiredText
    location: str = ""
    detected_disease: Optional[str] = None
    confidence: float = Field(0, ge=0, le=100)
    crop_type: Optional[str] = None
    description: Optional[str] = None
    symptoms: list[str] = []


class CommentCreate(CamelModel):
    user_id: RequiredText
    message: RequiredText
    user_name: str = "Anonymous"
    user_email: str = ""
    subject: str = "General Feedback"
    category: str = "general"
    related_id: Optional[str] = None


# --- Workflow payloads ---

class MarketChemicalUpdate(CamelModel):
    price: Optional[float] = Field(None, ge=0)
    available: Optional[bool] = None


class ApproveRequest(CamelModel):
    disease_data: Optional[dict] = None


class RejectRequest(CamelModel):
    reason: Optional[str] = None


class ReplyRequest(CamelModel):
    reply: str = ""
    replied_by: Optional[str] = None


def describe_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic error into a field-specific message, e.g. ``name.en: Field required``"""
    parts = []
    for item in error.errors():
        field = ".".join(str(loc) for loc in item["loc"]) or "body"
        parts.append(f"{field}: {item['msg']}")
    return "; ".join(parts)
