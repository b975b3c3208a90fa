from enum import Enum
from typing import Optional, Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AnalysisResult(BaseModel):
    """Structured disease verdict.

    Validators sanitize provider output: confidence is clamped to 0..100,
    severity falls back to medium, list fields accept a bare string or null,
    and a healthy verdict never reports a detected disease.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    detected: bool = False
    is_healthy: bool = False
    disease_name: str = "Unknown"
    disease_name_amharic: Optional[str] = None
    disease_name_oromifa: Optional[str] = None
    confidence: float = 0
    description: str = ""
    symptoms: list[str] = []
    treatment: list[str] = []
    prevention: list[str] = []
    affected_crops: list[str] = []
    severity: Severity = Severity.MEDIUM

    @field_validator("confidence")
    @classmethod
    def clamp_confidence(cls, v: float) -> float:
        return max(0.0, min(100.0, v))

    @field_validator("severity", mode="before")
    @classmethod
    def normalize_severity(cls, v: Any) -> str:
        v = str(v or "").strip().lower()
        return v if v in {s.value for s in Severity} else Severity.MEDIUM.value

    @field_validator("symptoms", "treatment", "prevention", "affected_crops", mode="before")
    @classmethod
    def normalize_list(cls, v: Any) -> list[str]:
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, (list, tuple)):
            raise ValueError("expected a list of strings")
        return [str(item).strip() for item in v if item is not None and str(item).strip()]

    @field_validator("disease_name", "description", mode="before")
    @classmethod
    def normalize_text(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @model_validator(mode="after")
    def healthy_is_not_detected(self) -> "AnalysisResult":
        if not self.disease_name:
            self.disease_name = "Unknown"
        if self.is_healthy:
            self.detected = False
        return self

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class AnalyzeBase64Request(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    image_base64: Optional[str] = None
    user_id: Optional[str] = None
    image_url: Optional[str] = None
    location: Optional[str] = None
