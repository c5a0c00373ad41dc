"""
Storefront REST API Connector
Generic HTTP client for the storefront API (auth, shops, products, categories,
subscriptions)

Every call resolves to an ApiResult(data, error) instead of raising, so callers
can surface the message inline:
- non-2xx responses carry the API "message" or "Error en la petición"
- network / decoding failures carry "Error de conexión"

Author: Mapu Team
Date: 2025-11-17
"""
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, Tuple, TypeVar, Union
from urllib.parse import urlencode

import httpx

logger = logging.getLogger(__name__)

T = TypeVar('T')
U = TypeVar('U')

REQUEST_ERROR = 'Error en la petición'
CONNECTION_ERROR = 'Error de conexión'

# (field name, httpx file value) pairs for multipart uploads
FormFile = Tuple[str, Any]


@dataclass
class ApiResult(Generic[T]):
    """Outcome of a storefront API call"""

    data: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def map(self, fn: Callable[[T], U]) -> 'ApiResult[U]':
        """Convert the payload (e.g. into a pydantic model) when present"""
        if self.error is not None or self.data is None:
            return ApiResult(data=None, error=self.error)
        return ApiResult(data=fn(self.data), error=None)


class TokenStore:
    """
    Local persistent storage for the session

    Keeps the bearer token and the cached user in a small JSON file, under
    the same keys the mobile app uses.
    """

    TOKEN_KEY = '@auth_token'
    USER_KEY = '@auth_user'

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        try:
            values = json.loads(self.path.read_text(encoding='utf-8'))
        except (OSError, ValueError):
            return {}
        return values if isinstance(values, dict) else {}

    def _write(self, values: Dict[str, Any]):
        self.path.write_text(json.dumps(values), encoding='utf-8')

    def get_token(self) -> Optional[str]:
        return self._read().get(self.TOKEN_KEY)

    def set_token(self, token: str):
        values = self._read()
        values[self.TOKEN_KEY] = token
        self._write(values)

    def get_user(self) -> Optional[Dict[str, Any]]:
        user = self._read().get(self.USER_KEY)
        return user if isinstance(user, dict) else None

    def set_user(self, user: Dict[str, Any]):
        values = self._read()
        values[self.USER_KEY] = user
        self._write(values)

    def remove(self):
        """Drop both token and user (logout)"""
        values = self._read()
        values.pop(self.TOKEN_KEY, None)
        values.pop(self.USER_KEY, None)
        self._write(values)


def _as_form_value(value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def build_query(filters: Optional[Dict[str, Any]]) -> str:
    """
    Build a '?a=1&b=2' suffix from filters, skipping None values

    Returns an empty string when nothing is left.
    """
    if not filters:
        return ''
    params = [(key, _as_form_value(value)) for key, value in filters.items() if value is not None]
    return f"?{urlencode(params)}" if params else ''


def build_form(data: Dict[str, Any]) -> Dict[str, str]:
    """
    Flatten a DTO into multipart text fields

    Nested objects (schedule, characteristics) are sent as JSON strings.
    """
    return {key: _as_form_value(value) for key, value in data.items() if value is not None}


class ApiClient:
    """
    HTTP client for the storefront REST API

    Attaches `Authorization: Bearer <token>` whenever the token store holds a
    session token.
    """

    def __init__(self, base_url: str, token_store: TokenStore,
                 transport: Optional[httpx.AsyncBaseTransport] = None, timeout: float = 30.0):
        self.base_url = base_url.rstrip('/')
        self.token_store = token_store
        self._transport = transport
        self._timeout = timeout

    # ==================== SESSION ====================

    def set_auth_token(self, token: str):
        self.token_store.set_token(token)

    def remove_auth_token(self):
        self.token_store.remove()

    def set_user(self, user: Dict[str, Any]):
        self.token_store.set_user(user)

    def get_user(self) -> Optional[Dict[str, Any]]:
        return self.token_store.get_user()

    def _auth_headers(self) -> Dict[str, str]:
        token = self.token_store.get_token()
        return {'Authorization': f'Bearer {token}'} if token else {}

    # ==================== REQUESTS ====================

    async def _send(self, method: str, endpoint: str, **kwargs) -> ApiResult:
        url = f"{self.base_url}{endpoint}"
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                response = await client.request(method, url, **kwargs)
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"API Error: {method} {endpoint}: {e}")
            return ApiResult(error=CONNECTION_ERROR)

        if not response.is_success:
            message = data.get('message') if isinstance(data, dict) else None
            if isinstance(message, list):
                message = ', '.join(str(m) for m in message)
            logger.warning(f"API request failed: {method} {endpoint} -> {response.status_code}")
            return ApiResult(error=message or REQUEST_ERROR)

        return ApiResult(data=data)

    async def request(self, method: str, endpoint: str, body: Any = None) -> ApiResult:
        headers = {'Content-Type': 'application/json', **self._auth_headers()}
        content = json.dumps(body) if body is not None else None
        return await self._send(method, endpoint, headers=headers, content=content)

    async def get(self, endpoint: str) -> ApiResult:
        return await self.request('GET', endpoint)

    async def post(self, endpoint: str, body: Any = None) -> ApiResult:
        return await self.request('POST', endpoint, body)

    async def patch(self, endpoint: str, body: Any = None) -> ApiResult:
        return await self.request('PATCH', endpoint, body)

    async def delete(self, endpoint: str) -> ApiResult:
        return await self.request('DELETE', endpoint)

    async def upload_form_data(self, endpoint: str, fields: Dict[str, str],
                               files: Optional[Iterable[FormFile]] = None) -> ApiResult:
        """
        POST multipart/form-data (file uploads)

        Text fields travel as filename-less parts so the body is multipart
        even without files. Content-Type is left to httpx so the boundary is set.
        """
        parts: List[FormFile] = [(key, (None, value)) for key, value in fields.items()]
        parts.extend(files or [])
        return await self._send('POST', endpoint, headers=self._auth_headers(), files=parts)
