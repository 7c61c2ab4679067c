"""Service for wallet-based authentication."""

import structlog

from xrpl_sale.executor import RequestExecutor
from xrpl_sale.models import AuthChallenge, AuthRequest, AuthResponse

logger = structlog.get_logger(__name__)


class AuthService:
    """Obtain, refresh and drop the bearer token used by the client.

    A successful :meth:`authenticate` or :meth:`refresh_token` switches every
    later request from the API key header to ``Authorization: Bearer``.
    """

    def __init__(self, executor: RequestExecutor):
        self._executor = executor

    def get_challenge(self, wallet_address: str) -> AuthChallenge:
        """Fetch the message the wallet has to sign."""
        return self._executor.execute(
            "POST",
            "/auth/challenge",
            json={"wallet_address": wallet_address},
            response_model=AuthChallenge,
        )

    def authenticate(self, request: AuthRequest) -> AuthResponse:
        """Exchange a signed challenge for a bearer token.

        Args:
            request: Wallet address, signature and timestamp

        Returns:
            Token details; the token is stored on the client
        """
        response = self._executor.execute(
            "POST", "/auth/wallet", json=request.to_payload(), response_model=AuthResponse
        )
        self._executor.set_auth_token(response.token)
        logger.info("authenticated", wallet_address=request.wallet_address)
        return response

    def refresh_token(self) -> AuthResponse:
        response = self._executor.execute(
            "POST", "/auth/refresh", json={}, response_model=AuthResponse
        )
        self._executor.set_auth_token(response.token)
        return response

    def logout(self) -> None:
        """Revoke the current token and fall back to the API key."""
        try:
            self._executor.execute("POST", "/auth/logout", json={})
        finally:
            self._executor.clear_auth_token()
