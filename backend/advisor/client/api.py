"""Thin HTTP client for the advisor REST surface."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class AdvisorApiError(RuntimeError):
    """Raised for non-2xx responses; carries the status and error code."""

    def __init__(self, status_code: int, message: str, code: Optional[str] = None) -> None:
        self.status_code = status_code
        self.code = code
        super().__init__(f"{status_code} {code or ''} {message}".strip())


class AdvisorClient:
    def __init__(
        self,
        base_url: str = "",
        token: Optional[str] = None,
        *,
        client: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.token = token
        self._owns_client = client is None
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)

    @property
    def authenticated(self) -> bool:
        return bool(self.token)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "AdvisorClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = self._client.request(method, path, headers=self._headers(), **kwargs)
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if response.status_code >= 400:
            message = payload.get("error") if isinstance(payload, dict) else None
            code = payload.get("code") if isinstance(payload, dict) else None
            raise AdvisorApiError(response.status_code, message or response.reason_phrase, code)
        return payload.get("data") if isinstance(payload, dict) else None

    def get_profile(self) -> Dict[str, Any]:
        return self._request("GET", "/api/profile")

    def update_profile(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", "/api/profile", json=dict(fields))

    def submit_assessment(self, answers: Any, result: Mapping[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/assessments", json={"answers": answers, "result": dict(result)})

    def get_streak(self) -> Dict[str, Any]:
        return self._request("GET", "/api/streak")

    def mark_streak(self) -> Dict[str, Any]:
        return self._request("POST", "/api/streak")

    def list_tasks(self, *, due_date: Optional[str] = "today", limit: int = 50) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"limit": limit}
        if due_date:
            params["due_date"] = due_date
        return self._request("GET", "/api/tasks", params=params) or []

    def create_tasks(self, entries: List[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        data = self._request("POST", "/api/tasks", json=[dict(entry) for entry in entries])
        return data if isinstance(data, list) else [data]

    def update_task(self, task_id: int, fields: Mapping[str, Any]) -> Dict[str, Any]:
        return self._request("PATCH", "/api/tasks", params={"id": task_id}, json=dict(fields))


__all__ = ["AdvisorApiError", "AdvisorClient"]
