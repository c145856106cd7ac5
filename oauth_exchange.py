"""
GitHub OAuth handling: the round-tripped ``state`` parameter, the code for
token exchange and the one-shot callback state machine that hands the token
to the provisioning workflow.
"""
import base64
import json
import logging
import urllib.parse
from enum import Enum
from typing import Awaitable, Callable, Optional

import requests
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from config import (
    API_BASE,
    AUTHORIZE_URL,
    CLIENT_ID,
    CLIENT_SECRET,
    FORWARDED_FOR_HEADER,
    OAUTH_SCOPE,
    REDIRECT_URI,
    REQUEST_TIMEOUT,
    TOKEN_URL,
)
from errors import (
    InvalidSelectionError,
    InvalidStateError,
    NetworkError,
    ProviderError,
    ProvisioningError,
    TokenExchangeError,
)
from models import Selection
from provisioning import provision

logger = logging.getLogger(__name__)


def encode_state(selection: Selection) -> str:
    """Serialize a complete selection into the OAuth ``state`` parameter"""
    if not selection.is_complete:
        raise InvalidSelectionError("Both a framework and a language must be selected")
    payload = json.dumps({
        "framework": selection.framework.value,
        "language": selection.language.value
    })
    return base64.b64encode(payload.encode('utf-8')).decode('ascii')


def decode_state(state: Optional[str]) -> Selection:
    """
    Decode the ``state`` parameter returned by GitHub

    Raises:
        InvalidStateError: If the state is missing, corrupted or does not
            describe a complete selection
    """
    if not state:
        raise InvalidStateError("Missing state parameter")
    try:
        payload = json.loads(base64.b64decode(state, validate=True).decode('utf-8'))
        selection = Selection.model_validate(payload)
    except (ValueError, ValidationError) as e:
        logger.error(f"Error parsing state: {str(e)}")
        raise InvalidStateError("Invalid state parameter") from e
    if not selection.is_complete:
        raise InvalidStateError("Invalid state parameter")
    return selection


def build_authorize_url(selection: Selection) -> str:
    params = urllib.parse.urlencode({
        "client_id": CLIENT_ID,
        "redirect_uri": REDIRECT_URI,
        "scope": OAUTH_SCOPE,
        "state": encode_state(selection)
    })
    return f"{AUTHORIZE_URL}?{params}"


def exchange_code_with_github(code: str, redirect_uri: str = REDIRECT_URI) -> str:
    """
    Exchange an authorization code for a GitHub access token

    This is the trusted backend half of the exchange: it is the only code
    that sees the client secret.
    """
    data = {
        'client_id': CLIENT_ID,
        'client_secret': CLIENT_SECRET,
        'code': code,
        'redirect_uri': redirect_uri
    }

    # Log the request data (without exposing the secret)
    log_data = data.copy()
    log_data['client_secret'] = f"{CLIENT_SECRET[:4]}..." if CLIENT_SECRET else "NOT_SET"
    log_data['code'] = f"{code[:4]}..."
    logger.info(f"Token exchange request data: {log_data}")

    try:
        response = requests.post(
            TOKEN_URL,
            headers={'Accept': 'application/json'},
            data=data,
            timeout=REQUEST_TIMEOUT
        )
    except requests.RequestException as e:
        logger.error(f"Network error during token exchange: {str(e)}")
        raise NetworkError(f"Network error during token exchange: {str(e)}") from e

    logger.info(f"Token exchange response status: {response.status_code}")
    if response.status_code != 200:
        raise TokenExchangeError(f"Failed to exchange code for token: HTTP {response.status_code}")

    try:
        response_data = response.json()
    except ValueError as e:
        raise TokenExchangeError("Failed to exchange code for token: malformed response") from e

    if 'error' in response_data:
        error_msg = response_data.get('error_description', response_data.get('error', 'Unknown error'))
        logger.error(f"GitHub OAuth error in response: {error_msg}")
        raise TokenExchangeError(f"GitHub OAuth error: {error_msg}")

    if not response_data.get('access_token'):
        logger.error(f"No access token in response. Response keys: {list(response_data.keys())}")
        raise TokenExchangeError("No access token in response")

    logger.info("Access token successfully obtained")
    return response_data['access_token']


class BackendTokenExchanger:
    """Calls the trusted backend's ``POST /github/oauth`` endpoint"""

    def __init__(self, api_base: str = API_BASE, timeout: float = REQUEST_TIMEOUT):
        self.url = f"{api_base.rstrip('/')}/github/oauth"
        self.timeout = timeout

    def exchange(self, code: str, client_host: Optional[str] = None) -> str:
        """
        Args:
            code: Authorization code from the GitHub redirect
            client_host: Address of the browser that completed the OAuth
                redirect, forwarded so the backend rate-limits per user
        """
        headers = {FORWARDED_FOR_HEADER: client_host} if client_host else {}
        try:
            response = requests.post(self.url, json={"code": code}, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Network error reaching token exchange backend: {str(e)}")
            raise NetworkError(f"Network error during token exchange: {str(e)}") from e

        if not response.ok:
            logger.error(f"Token exchange backend returned {response.status_code}")
            raise TokenExchangeError("Failed to exchange code for token")

        try:
            access_token = response.json().get('access_token')
        except (ValueError, AttributeError) as e:
            raise TokenExchangeError("Failed to exchange code for token") from e
        if not access_token:
            raise TokenExchangeError("Token exchange response did not include an access token")
        return access_token


class ExchangeState(str, Enum):
    AWAITING_CALLBACK = "awaiting_callback"
    COMPLETED = "completed"
    FAILED = "failed"


class OAuthCallbackExchange:
    """
    Handles one GitHub OAuth callback from ``{code, state}`` to a redirect

    ``handle`` runs exactly once. Afterwards ``state`` is terminal and
    ``redirect_url`` points at the new repository or at the application root
    with an ``error`` query parameter.
    """

    def __init__(self, token_exchanger: Optional[BackendTokenExchanger] = None,
                 provisioner: Callable[[Selection, str], Awaitable[str]] = provision):
        self.token_exchanger = token_exchanger or BackendTokenExchanger()
        self.provisioner = provisioner
        self.state = ExchangeState.AWAITING_CALLBACK
        self.selection: Optional[Selection] = None
        self.error: Optional[ProvisioningError] = None
        self.repository_url: Optional[str] = None

    async def handle(self, code: Optional[str], state: Optional[str],
                     client_host: Optional[str] = None) -> ExchangeState:
        if self.state is not ExchangeState.AWAITING_CALLBACK:
            raise RuntimeError("OAuth callback has already been handled")

        try:
            self.selection = decode_state(state)
            if not code:
                raise TokenExchangeError("Missing authorization code")

            access_token = await run_in_threadpool(self.token_exchanger.exchange, code, client_host)
            self.repository_url = await self.provisioner(self.selection, access_token)
        except ProvisioningError as e:
            logger.error(f"OAuth callback failed: {type(e).__name__}: {e.message}")
            return self._fail(e)
        except Exception as e:
            logger.exception(f"OAuth callback failed unexpectedly: {str(e)}")
            return self._fail(ProviderError(f"Unexpected error while provisioning: {str(e)}"))

        logger.info(f"OAuth callback completed: {self.repository_url}")
        self.state = ExchangeState.COMPLETED
        return self.state

    def _fail(self, error: ProvisioningError) -> ExchangeState:
        self.error = error
        self.state = ExchangeState.FAILED
        return self.state

    @property
    def redirect_url(self) -> Optional[str]:
        if self.state is ExchangeState.COMPLETED:
            return self.repository_url
        if self.state is ExchangeState.FAILED:
            return '/?' + urllib.parse.urlencode({'error': self.error.message})
        return None
