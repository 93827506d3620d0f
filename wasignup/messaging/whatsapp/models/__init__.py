"""Pydantic models for Graph API payloads."""

from .business_models import RemoteBusinessAccount, RemotePhoneNumber
from .oauth_models import AccessToken
from .template_models import Template, TemplateQualityScore

__all__ = [
    "AccessToken",
    "RemoteBusinessAccount",
    "RemotePhoneNumber",
    "Template",
    "TemplateQualityScore",
]
