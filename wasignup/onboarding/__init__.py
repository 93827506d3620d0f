"""
Embedded signup onboarding flows.
"""

from .models import (
    OnboardingRequest,
    OnboardingResult,
    SendTestMessageRequest,
    TemplatesRequest,
    TemplatesResult,
    TokenInfo,
)
from .orchestrator import OnboardingOrchestrator

__all__ = [
    "OnboardingOrchestrator",
    "OnboardingRequest",
    "OnboardingResult",
    "SendTestMessageRequest",
    "TemplatesRequest",
    "TemplatesResult",
    "TokenInfo",
]
