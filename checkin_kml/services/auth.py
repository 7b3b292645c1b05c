"""OAuth2 authorization-code helpers for the remote service."""

from __future__ import annotations

from typing import Mapping, Optional
from urllib import parse as urllib_parse

from ..config import API_CONFIG, CLIENT_CONFIG, ApiConfig, ClientConfig
from ..core.exceptions import DecodeError
from .http import HttpClient, JsonClient


class Authenticator:
    """Build the user consent URL and trade authorization codes for tokens."""

    def __init__(
        self,
        client: ClientConfig = CLIENT_CONFIG,
        http_client: Optional[JsonClient] = None,
        config: ApiConfig = API_CONFIG,
    ):
        self.client = client
        self.http_client = http_client or HttpClient()
        self.config = config

    @property
    def token_url(self) -> str:
        return f"{self.config.oauth_base_url}/access_token"

    def authorization_url(self) -> str:
        query = urllib_parse.urlencode(
            {
                "response_type": "code",
                "client_id": self.client.client_id,
                "redirect_uri": self.client.redirect_url,
            }
        )
        return f"{self.config.oauth_base_url}/authenticate?{query}"

    def exchange(self, code: str) -> str:
        params = {
            "grant_type": "authorization_code",
            "client_id": self.client.client_id,
            "client_secret": self.client.client_secret,
            "redirect_uri": self.client.redirect_url,
            "code": code,
        }
        payload = self.http_client.get_json(self.token_url, params, self.config.timeout)
        token = payload.get("access_token") if isinstance(payload, Mapping) else None
        if not token:
            raise DecodeError("token response did not include an access_token")
        return str(token)
