from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

SECTIONS = ("contact", "education", "experience", "skills", "projects", "achievements")


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    overall_score: int = Field(alias="overallScore", ge=0, le=100)
    scores: Dict[str, int]
    findings: List[str]
    recommendations: List[str]

    @field_validator("scores")
    @classmethod
    def check_sections(cls, v: Dict[str, int]) -> Dict[str, int]:
        if set(v) != set(SECTIONS):
            raise ValueError(f"scores must contain exactly {', '.join(SECTIONS)}")
        for section, score in v.items():
            if not 0 <= score <= 100:
                raise ValueError(f"score for {section} out of range: {score}")
        return v


class PersistedRecord(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    file_name: str = Field(alias="fileName")
    blob_url: str = Field(alias="blobUrl")
    analysis: AnalysisResult
    timestamp: str


class ErrorResponse(BaseModel):
    error: str
    details: str
