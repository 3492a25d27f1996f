"""
API Client
==========

Thin wrapper over a requests.Session that talks to the TAPI server and
normalises every outcome into either the envelope's ``data`` or one of:

- NetworkError: no response (connection refused, DNS, timeout)
- HttpError: response status outside 2xx
- ApplicationError: 2xx response whose JSON envelope says success: false

The server answers ``{success: bool, data, message?}``.
"""

import asyncio

import requests

from .config import Config
from .errors import ApplicationError, HttpError, NetworkError
from .logging_service import LoggingService


def unwrap_envelope(resp):
    """
    Turn a requests.Response into the envelope's data, or raise.

    Args:
        resp: requests.Response

    Returns:
        The ``data`` member of the envelope (any JSON value)
    """
    try:
        body = resp.json()
    except ValueError:
        body = None

    message = body.get('message') if isinstance(body, dict) else None

    if not 200 <= resp.status_code < 300:
        raise HttpError(resp.status_code, message or f"HTTP {resp.status_code}")

    if not isinstance(body, dict):
        raise ApplicationError('Invalid JSON response')

    if not body.get('success'):
        raise ApplicationError(message or 'Request failed')

    return body.get('data')


class ApiClient:
    """Blocking HTTP calls plus an awaitable wrapper for the event loop"""

    def __init__(self, base_url=None, timeout=None, session=None):
        self.base_url = (base_url or Config.API_URL).rstrip('/')
        self.timeout = timeout if timeout is not None else Config.REQUEST_TIMEOUT
        self.session = session or requests.Session()

    def url_for(self, path):
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(self, method, path, headers=None, json=None, files=None, source='api'):
        """
        Perform one HTTP call and unwrap the response envelope.

        Args:
            method: HTTP verb
            path: Path relative to the base URL (e.g. "/product/create")
            headers: Extra headers (bearer credentials)
            json: JSON body, for the auth endpoints
            files: multipart parts as produced by MultipartPayload.as_requests_files()
            source: Component name for the activity log

        Returns:
            Envelope data
        """
        method = method.upper()
        try:
            resp = self.session.request(
                method,
                self.url_for(path),
                headers=headers or {},
                json=json,
                files=files,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            LoggingService.log_api_call(source, path, method, None, {'error': str(e)})
            raise NetworkError(f"Network error: {e}") from e

        LoggingService.log_api_call(source, path, method, resp.status_code)
        return unwrap_envelope(resp)

    async def send(self, method, path, headers=None, json=None, files=None, source='api'):
        """Same as request(), run in a worker thread so the event loop keeps going"""
        return await asyncio.to_thread(
            self.request, method, path,
            headers=headers, json=json, files=files, source=source,
        )

    def close(self):
        self.session.close()
