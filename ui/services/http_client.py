from __future__ import annotations

import logging
import time
from typing import Any, Dict, Iterator, Optional

import requests

from ui.settings.config import AppSettings
from ui.utils.request_id import generate_request_id

logger = logging.getLogger(__name__)

TIMEOUT = (5, 15)


class ServiceError(RuntimeError):
    """API failure with a category the console maps to a user-facing hint."""

    category: str
    status: Optional[int]

    def __init__(
        self, message: str, *, category: str, status: Optional[int] = None
    ) -> None:
        super().__init__(message)
        self.category = category
        self.status = status


def _category(status: int) -> str:
    if status in (400, 422):
        return "user"
    if status == 404:
        return "not_found"
    return "server"


def _detail(response: requests.Response) -> str:
    # FastAPI puts the reason under "detail"; fall back to the raw body
    try:
        body = response.json()
    except ValueError:
        return response.text[:300]
    if isinstance(body, dict) and "detail" in body:
        return str(body["detail"])[:300]
    return response.text[:300]


def _delays(retries: int, first: float = 0.5, cap: float = 2.0) -> Iterator[float]:
    delay = first
    for _ in range(retries - 1):
        yield delay
        delay = min(delay * 2, cap)


class HttpClient:
    """Thin ``requests`` wrapper: request ids, retries on transport errors only."""

    def __init__(self, settings: AppSettings) -> None:
        self.settings = settings
        self.session = requests.Session()
        self.session.headers.update(
            {"User-Agent": f"signaldesk-ui/{settings.app_version}"}
        )

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        ui_action: str = "",
        request_id: Optional[str] = None,
    ) -> Any:
        url = f"{self.settings.api_base_url}{path}"
        req_id = request_id or generate_request_id()
        headers = {"x-request-id": req_id, "x-ui-action": ui_action or path}
        log_extra = {"ui_action": ui_action, "request_id": req_id}

        delays = _delays(self.settings.request_retries)
        attempt = 0
        while True:
            attempt += 1
            start = time.perf_counter()
            try:
                response = self.session.request(
                    method, url, params=params, json=json, timeout=TIMEOUT, headers=headers
                )
            except requests.RequestException as exc:
                kind = "timeout" if isinstance(exc, requests.Timeout) else "failure"
                logger.warning(
                    "api network %s", kind, extra={**log_extra, "attempt": attempt}
                )
                delay = next(delays, None)
                if delay is None:
                    raise ServiceError(f"network {kind}", category="network") from exc
                time.sleep(delay)
                continue
            latency_ms = (time.perf_counter() - start) * 1000
            return self._decode(response, latency_ms, log_extra)

    def _decode(
        self, response: requests.Response, latency_ms: float, log_extra: Dict[str, Any]
    ) -> Any:
        status = response.status_code
        if status >= 400:
            logger.error(
                "api failure",
                extra={**log_extra, "status": status, "latency_ms": latency_ms},
            )
            raise ServiceError(
                f"API {status}: {_detail(response)}",
                category=_category(status),
                status=status,
            )
        logger.info("api success", extra={**log_extra, "latency_ms": latency_ms})
        return response.json() if response.content else None
