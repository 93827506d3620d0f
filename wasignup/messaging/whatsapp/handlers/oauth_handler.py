"""
OAuth handler for the embedded signup flow.

Embedded signup does not always honour the standard OAuth ``redirect_uri``
contract, so the code exchange walks an ordered table of request shapes and
keeps the first one the platform accepts.
"""

from collections.abc import Callable
from dataclasses import dataclass

from pydantic import ValidationError as PydanticValidationError

from wasignup.core.errors import UpstreamError
from wasignup.core.logging.logger import get_logger
from wasignup.messaging.whatsapp.client.graph_client import GraphClient
from wasignup.messaging.whatsapp.models.oauth_models import AccessToken
from wasignup.messaging.whatsapp.utils.error_helpers import (
    describe_graph_error,
    parse_graph_error,
)

# Token exchange failures are attributed to the caller's authorization code
TOKEN_EXCHANGE_STATUS = 400


@dataclass(frozen=True)
class TokenExchangeStrategy:
    """One request shape for ``oauth/access_token``.

    Attributes:
        name: Label used in logs and aggregated errors
        build: Adds the redirect handling to the base credential form
        needs_redirect_uri: Only attempted when the caller supplied one
    """

    name: str
    build: Callable[[dict[str, str], str], dict[str, str]]
    needs_redirect_uri: bool = False


TOKEN_EXCHANGE_STRATEGIES: tuple[TokenExchangeStrategy, ...] = (
    TokenExchangeStrategy(
        name="omit redirect_uri",
        build=lambda form, redirect_uri: dict(form),
    ),
    TokenExchangeStrategy(
        name="empty redirect_uri",
        build=lambda form, redirect_uri: {**form, "redirect_uri": ""},
    ),
    TokenExchangeStrategy(
        name="caller redirect_uri",
        build=lambda form, redirect_uri: {**form, "redirect_uri": redirect_uri},
        needs_redirect_uri=True,
    ),
)


class WhatsAppOAuthHandler:
    """
    Handler for token exchange and token validation.

    Provides composition-based OAuth functionality for WhatsAppPlatform.
    """

    def __init__(
        self,
        client: GraphClient,
        app_id: str,
        app_secret: str,
        strategies: tuple[TokenExchangeStrategy, ...] = TOKEN_EXCHANGE_STRATEGIES,
    ):
        self.client = client
        self.app_id = app_id
        self.app_secret = app_secret
        self.strategies = strategies
        self.logger = get_logger(__name__)

    def strategies_for(self, redirect_uri: str) -> list[TokenExchangeStrategy]:
        """Strategies to attempt, in order, for this redirect URI."""
        return [
            strategy
            for strategy in self.strategies
            if redirect_uri or not strategy.needs_redirect_uri
        ]

    async def exchange_token(self, auth_code: str, redirect_uri: str) -> AccessToken:
        """
        Exchange an authorization code for an access token.

        Args:
            auth_code: Code returned by the embedded signup dialog
            redirect_uri: Redirect URI the dialog used, may be empty

        Returns:
            AccessToken from the first strategy answered with HTTP 200

        Raises:
            UpstreamError: If credentials are missing, the successful body
                cannot be parsed, or every attempted strategy fails
        """
        if not self.app_id or not self.app_secret:
            raise UpstreamError(
                "missing Facebook app credentials in config",
                status_code=TOKEN_EXCHANGE_STATUS,
            )

        base_form = {
            "client_id": self.app_id,
            "client_secret": self.app_secret,
            "code": auth_code,
        }
        oauth_url = self.client.url_builder.get_oauth_url()

        attempts: list[str] = []
        last_error: UpstreamError | None = None

        for number, strategy in enumerate(self.strategies_for(redirect_uri), start=1):
            form = strategy.build(base_form, redirect_uri)
            self.logger.info(
                f"Trying token exchange strategy {number} ({strategy.name})"
            )

            try:
                response = await self.client.post_form(oauth_url, form)
            except UpstreamError as err:
                last_error = err
                attempts.append(f"strategy {number} ({strategy.name}): {err}")
                continue

            if response.ok:
                self.logger.info(f"Token exchange successful with strategy {number}")
                try:
                    return AccessToken.model_validate(response.json())
                except (ValueError, PydanticValidationError) as err:
                    raise UpstreamError(
                        f"failed to parse token response: {err}; raw={response.body}",
                        status_code=TOKEN_EXCHANGE_STATUS,
                    ) from err

            graph_error = parse_graph_error(response.body)
            message = (
                f"strategy {number} failed ({response.status}): "
                f"{describe_graph_error(response.body)}"
            )
            self.logger.warning(message)
            attempts.append(message)
            last_error = UpstreamError(
                message,
                status_code=TOKEN_EXCHANGE_STATUS,
                upstream_status=response.status,
                graph_error=graph_error,
            )

        raise UpstreamError(
            f"all token exchange strategies failed, last error: {last_error}",
            status_code=TOKEN_EXCHANGE_STATUS,
            upstream_status=last_error.upstream_status if last_error else None,
            graph_error=last_error.graph_error if last_error else None,
            attempts=attempts,
        )

    async def validate_token(self, access_token: str) -> bool:
        """
        Liveness check of an access token against ``me``.

        Returns:
            True on HTTP 200, False on any other status

        Raises:
            UpstreamError: On transport failure
        """
        response = await self.client.get("me", access_token)
        if response.ok:
            return True

        self.logger.warning(
            f"Token invalid ({response.status}): {describe_graph_error(response.body)}"
        )
        return False
