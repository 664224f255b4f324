"""
OAuth token provider for the Tasks client

Holds Google OAuth2 credentials built from a refresh token (or a bare access
token) and hands out valid access tokens, refreshing them when expired.
"""
import asyncio
from typing import Any, Dict, List, Mapping, Optional

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

from ...utils.config import ConfigDefaults, TasksSettings
from ...utils.logger import setup_logger
from ..base_exceptions import (
    AuthenticationException,
    ConfigurationException,
    wrap_external_exception,
)

logger = setup_logger(__name__)

SERVICE_NAME = "GoogleTasks"

# option name -> accepted spellings
_OPTION_ALIASES: Dict[str, List[str]] = {
    "client_id": ["client_id", "clientId"],
    "client_secret": ["client_secret", "clientSecret"],
    "refresh_token": ["refresh_token", "refreshToken"],
    "access_token": ["access_token", "accessToken"],
    "token_uri": ["token_uri", "tokenUri"],
    "scopes": ["scopes"],
}


def _pick(options: Mapping[str, Any], name: str) -> Any:
    for key in _OPTION_ALIASES[name]:
        if options.get(key):
            return options[key]
    return None


class GoogleTokenProvider:
    """
    Token collaborator used by ``TasksClient``.

    Interface:
        configure(options)        merge OAuth options, rebuild credentials
        to_json()                 status dict, ``configured`` tells whether tokens can be issued
        get_access_token()        coroutine returning a valid access token
    """

    def __init__(self, options: Optional[Mapping[str, Any]] = None):
        self._options: Dict[str, Any] = {
            "token_uri": ConfigDefaults.TOKEN_URI,
            "scopes": [ConfigDefaults.TASKS_SCOPE],
        }
        self.credentials: Optional[Credentials] = None
        self._lock = asyncio.Lock()
        if options:
            self.configure(options)

    @classmethod
    def from_settings(cls, settings: TasksSettings) -> "GoogleTokenProvider":
        return cls(settings.auth_options())

    def configure(self, options: Optional[Mapping[str, Any]]) -> None:
        """Merge the OAuth fields of ``options``; anything else is ignored."""
        if not options or not isinstance(options, Mapping):
            return

        changed = False
        for name in _OPTION_ALIASES:
            value = _pick(options, name)
            if value is None:
                continue
            if name == "scopes" and isinstance(value, str):
                value = value.split()
            self._options[name] = value
            changed = True

        if changed:
            self.credentials = self._build_credentials()
            logger.debug("token_provider_configured", **self._status())

    def _build_credentials(self) -> Optional[Credentials]:
        opts = self._options
        if not opts.get("access_token") and not opts.get("refresh_token"):
            return None
        return Credentials(
            token=opts.get("access_token"),
            refresh_token=opts.get("refresh_token"),
            token_uri=opts.get("token_uri"),
            client_id=opts.get("client_id"),
            client_secret=opts.get("client_secret"),
            scopes=list(opts.get("scopes") or []),
        )

    @property
    def can_refresh(self) -> bool:
        opts = self._options
        return bool(opts.get("refresh_token") and opts.get("client_id") and opts.get("client_secret"))

    @property
    def is_configured(self) -> bool:
        return self.credentials is not None and (self.can_refresh or bool(self.credentials.token))

    def _status(self) -> Dict[str, Any]:
        creds = self.credentials
        expiry = creds.expiry if creds is not None else None
        return {
            "configured": self.is_configured,
            "can_refresh": self.can_refresh,
            "has_access_token": bool(creds is not None and creds.token),
            "expired": bool(creds is not None and creds.expired),
            "expiry": expiry.isoformat() if expiry else None,
            "scopes": list(self._options.get("scopes") or []),
        }

    def to_json(self) -> Dict[str, Any]:
        """Status snapshot. Never contains secrets or tokens."""
        return self._status()

    async def get_access_token(self) -> str:
        """
        Return a valid access token, refreshing it first when needed.

        Raises:
            ConfigurationException: no credentials configured
            AuthenticationException: refresh rejected or failed in transport
        """
        if not self.is_configured:
            raise ConfigurationException(
                message="Google Tasks OAuth credentials are not configured",
                service_name=SERVICE_NAME
            )

        async with self._lock:
            creds = self.credentials
            if creds.token and not creds.expired:
                return creds.token

            if not self.can_refresh:
                raise AuthenticationException(
                    message="Access token expired and no refresh token is configured",
                    service_name=SERVICE_NAME
                )

            logger.info(f"Refreshing Google Tasks access token (expired={creds.expired})")
            try:
                await asyncio.to_thread(creds.refresh, Request())
            except GoogleAuthError as e:
                logger.error(f"Google Tasks token refresh failed: {e}")
                raise wrap_external_exception(
                    e, SERVICE_NAME, "refresh_token",
                    exception_class=AuthenticationException
                ) from e

            return creds.token
