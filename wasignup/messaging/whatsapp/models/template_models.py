"""
Message template models.

Templates are listed for the caller and never persisted.
"""

from pydantic import BaseModel, ConfigDict


class TemplateQualityScore(BaseModel):
    model_config = ConfigDict(extra="ignore")

    score: str = ""


class Template(BaseModel):
    """Entry of ``{waba_id}/message_templates``."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""
    language: str = ""
    status: str = ""
    category: str = ""
    quality_score: TemplateQualityScore | None = None
