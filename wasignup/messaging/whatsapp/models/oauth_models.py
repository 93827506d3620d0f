"""
OAuth models for the embedded signup token exchange.
"""

from pydantic import BaseModel, ConfigDict


class AccessToken(BaseModel):
    """Access token returned by ``oauth/access_token``.

    Ephemeral: only ever stored as part of an Account.
    """

    model_config = ConfigDict(extra="ignore")

    access_token: str
    token_type: str = ""
    expires_in: int = 0

    @property
    def preview(self) -> str:
        """First characters of the token, safe for logs and responses."""
        return f"{self.access_token[:20]}..."
