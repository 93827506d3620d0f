"""
Business asset models returned by the Graph API.

These are transient views of remote state fetched per onboarding run.
"""

from pydantic import BaseModel, ConfigDict


class RemoteBusinessAccount(BaseModel):
    """Entry of ``me/businesses``."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""
    verification_status: str = ""
    profile_picture_uri: str = ""


class RemotePhoneNumber(BaseModel):
    """Entry of ``{waba_id}/phone_numbers``."""

    model_config = ConfigDict(extra="ignore")

    id: str
    display_phone_number: str = ""
    verified_name: str = ""
    quality_rating: str = ""
    status: str = ""
    code_verification_status: str = ""

    @property
    def is_verified(self) -> bool:
        return self.code_verification_status == "VERIFIED"
