# locations_api/services/auth.py
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from ..utils.http import get_json

logger = logging.getLogger(__name__)


class AuthServiceError(Exception):
    """The auth provider could not be reached or answered unexpectedly."""


@dataclass
class AuthenticatedUser:
    id: str
    access_token: str
    email: Optional[str] = None


class SupabaseAuthClient:
    """Validates access tokens against Supabase Auth (GET /auth/v1/user)."""

    def __init__(
        self,
        supabase_url: Optional[str],
        api_key: Optional[str],
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.supabase_url = (supabase_url or "").rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    async def get_user(self, token: str) -> Optional[AuthenticatedUser]:
        """Return the token's user, or None if Supabase rejects the token."""
        if not self.supabase_url or not self.api_key:
            raise AuthServiceError("Supabase auth is not configured")

        headers = {"apikey": self.api_key, "Authorization": f"Bearer {token}"}
        try:
            data = await get_json(
                f"{self.supabase_url}/auth/v1/user",
                headers=headers,
                timeout=self.timeout,
                transport=self.transport,
            )
        except httpx.HTTPStatusError as e:
            if e.response.status_code in (400, 401, 403):
                return None
            raise AuthServiceError(f"Supabase auth {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise AuthServiceError(str(e)) from e

        user_id = (data or {}).get("id")
        if not user_id:
            return None
        return AuthenticatedUser(id=user_id, access_token=token, email=data.get("email"))
