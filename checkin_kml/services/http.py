"""Blocking JSON-over-HTTP transport."""

from __future__ import annotations

import json
import logging
from http import client as http_client
from typing import Dict, Protocol
from urllib import error as urllib_error
from urllib import parse as urllib_parse
from urllib import request as urllib_request

from ..core.exceptions import DecodeError, TransportError

LOGGER = logging.getLogger(__name__)

ERROR_BODY_LIMIT = 4096


class JsonClient(Protocol):
    def get_json(self, url: str, params: Dict[str, object], timeout: int) -> object:
        ...


class HttpClient:
    """Small wrapper around :func:`urllib.request.urlopen` with headers.

    Non-2xx answers and network failures raise :class:`TransportError`; a
    body that is not valid JSON raises :class:`DecodeError`. No retries.
    """

    _DEFAULT_HEADERS = {"User-Agent": "CheckinKML/1.0", "Accept": "application/json"}

    def get_json(self, url: str, params: Dict[str, object], timeout: int) -> object:
        query = urllib_parse.urlencode(params)
        full_url = f"{url}?{query}" if query else url
        request = urllib_request.Request(full_url, headers=self._DEFAULT_HEADERS)
        try:
            with urllib_request.urlopen(request, timeout=timeout) as response:
                data = response.read()
        except urllib_error.HTTPError as exc:
            raise self._status_error(exc) from exc
        except (urllib_error.URLError, http_client.HTTPException, OSError) as exc:
            reason = getattr(exc, "reason", exc)
            raise TransportError(f"request failed: {reason}", details={"url": url}) from exc

        try:
            return json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise DecodeError(f"malformed response body: {exc}", details={"url": url}) from exc

    @staticmethod
    def _status_error(exc: urllib_error.HTTPError) -> TransportError:
        status = f"{exc.code} {exc.reason}"
        try:
            body = exc.read(ERROR_BODY_LIMIT).decode("utf-8", errors="replace").strip()
        except OSError:
            body = ""

        message = f"request failed with status {status}"
        if body:
            message = f"{message}: {body}"
        LOGGER.debug("Upstream error for %s: %s", exc.url, message)
        return TransportError(message, status=exc.code, body=body or None)
