from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import requests

from .envelope import error_message


logger = logging.getLogger(__name__)

PUBLIC_PATHS: Tuple[str, ...] = ("/auth/login", "/auth/register")


@dataclass(frozen=True)
class GatewayResponse:
    ok: bool
    status_code: int
    url: str
    method: str
    data: Any = None
    text: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "status_code": self.status_code,
            "url": self.url,
            "method": self.method,
            "data": self.data,
            "text": self.text,
            "error": self.error,
        }


class TaskflowGateway:
    """Thin JSON-over-HTTP wrapper around the TaskFlow REST API.

    Every call returns a ``GatewayResponse``; transport failures come back
    as ``ok=False`` with ``status_code=0`` instead of raising.
    """

    def __init__(
        self,
        *,
        base_url: str,
        token: Optional[str] = None,
        verify_ssl: bool = True,
        timeout_seconds: float = 30,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/")
        self.token = token
        self.verify_ssl = bool(verify_ssl)
        self.timeout_seconds = float(timeout_seconds)

        self._session = session or requests.Session()

    @classmethod
    def from_config(cls, config: Any, *, token: Optional[str] = None) -> "TaskflowGateway":
        return cls(
            base_url=config.api_base_url,
            token=token or config.api_token,
            verify_ssl=config.verify_ssl,
            timeout_seconds=config.timeout_seconds,
        )

    def set_token(self, token: Optional[str]) -> None:
        self.token = token or None

    @staticmethod
    def is_public(path: str) -> bool:
        clean = "/" + (path or "").split("?")[0].strip("/")
        return clean in PUBLIC_PATHS

    def _build_headers(self, path: str, headers: Optional[Dict[str, str]]) -> Dict[str, str]:
        merged: Dict[str, str] = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self.token and not self.is_public(path):
            merged["Authorization"] = f"Bearer {self.token}"
        if headers:
            merged.update({k: str(v) for k, v in headers.items()})
        return merged

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        timeout_seconds: Optional[float] = None,
    ) -> GatewayResponse:
        method_u = (method or "GET").upper().strip()
        path = path or ""
        if not path.startswith("/"):
            path = "/" + path
        url = f"{self.base_url}{path}"

        logger.debug("%s %s", method_u, url)
        try:
            resp = self._session.request(
                method_u,
                url,
                params=params,
                json=json_body,
                headers=self._build_headers(path, headers),
                verify=self.verify_ssl,
                timeout=(timeout_seconds or self.timeout_seconds),
            )
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method_u, url, exc)
            return GatewayResponse(
                ok=False,
                status_code=0,
                url=url,
                method=method_u,
                error=str(exc),
            )

        text = resp.text or None
        parsed: Any = None
        if text:
            try:
                parsed = resp.json()
            except ValueError:
                # Some endpoints mislabel JSON as text/plain.
                try:
                    parsed = json.loads(text)
                except ValueError:
                    parsed = None

        status = int(resp.status_code)
        if 200 <= status < 300:
            return GatewayResponse(
                ok=True,
                status_code=status,
                url=url,
                method=method_u,
                data=parsed if parsed is not None else text,
            )

        detail = error_message(parsed) if parsed is not None else None
        if detail is None and text:
            detail = text[:2000]
        logger.warning("%s %s returned HTTP %s", method_u, url, status)
        return GatewayResponse(
            ok=False,
            status_code=status,
            url=url,
            method=method_u,
            data=parsed,
            text=text[:2000] if text else None,
            error=detail or f"HTTP {status}",
        )

    def get(self, path: str, **kwargs: Any) -> GatewayResponse:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, json_body: Any = None, **kwargs: Any) -> GatewayResponse:
        return self.request("POST", path, json_body=json_body, **kwargs)

    def put(self, path: str, json_body: Any = None, **kwargs: Any) -> GatewayResponse:
        return self.request("PUT", path, json_body=json_body, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> GatewayResponse:
        return self.request("DELETE", path, **kwargs)
