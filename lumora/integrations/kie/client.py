"""
Kie.ai job API client (Sora 2 text-to-video).

Implements:
1. create_sora_task(prompt, ...) -> task_id
2. query_task_status(task_id) -> TaskStatus
3. wait_for_task_completion(task_id, ...) -> TaskStatus
4. parse_result_urls(result_json) -> dict | None

Endpoints (https://api.kie.ai/api/v1):
- POST /jobs/createTask
- GET  /jobs/recordInfo?taskId=...

Every reply is wrapped as {"code", "message"/"msg", "data"}; code 200 is
the only success.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.kie.ai/api/v1"
SORA_MODEL = "sora-2-text-to-video"
REQUEST_TIMEOUT_S = 30


class KieError(Exception):
    """Raised when Kie.ai is unconfigured or returns an error response."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        self.message = message
        self.status_code = status_code
        self.body = body[:500] if body else None
        super().__init__(message)


class KieTimeoutError(KieError):
    """Raised when a task does not reach a terminal state in time."""

    pass


@dataclass
class TaskStatus:
    """
    State of a Kie.ai job.

    State values: waiting, queuing, generating, success, fail.
    """

    task_id: str
    state: str
    model: str | None = None
    result_json: str | None = None
    fail_code: str | None = None
    fail_msg: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "TaskStatus":
        return cls(
            task_id=data.get("taskId", ""),
            state=data.get("state", ""),
            model=data.get("model"),
            result_json=data.get("resultJson") or None,
            fail_code=data.get("failCode") or None,
            fail_msg=data.get("failMsg") or None,
            raw=data,
        )

    def is_terminal(self) -> bool:
        return self.state in ("success", "fail")

    def is_success(self) -> bool:
        return self.state == "success"

    def to_dict(self) -> dict[str, Any]:
        return {
            "task_id": self.task_id,
            "state": self.state,
            "model": self.model,
            "result_json": self.result_json,
            "fail_code": self.fail_code,
            "fail_msg": self.fail_msg,
            "create_time": self.raw.get("createTime"),
            "update_time": self.raw.get("updateTime"),
            "complete_time": self.raw.get("completeTime"),
            "parsed_results": parse_result_urls(self.result_json),
        }


def parse_result_urls(result_json: str | None) -> dict[str, Any] | None:
    """
    Parse a task's resultJson string.

    Returns:
        {"result_urls": [...], "result_watermark_urls": [...] | None},
        or None when there is nothing to parse or it is not valid JSON.
    """
    if not result_json:
        return None
    try:
        parsed = json.loads(result_json)
    except (TypeError, ValueError):
        return None
    if not isinstance(parsed, dict):
        return None
    return {
        "result_urls": parsed.get("resultUrls") or [],
        "result_watermark_urls": parsed.get("resultWaterMarkUrls"),
    }


def _error_detail(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.reason or f"Kie.ai request failed with {response.status_code}"
    if isinstance(data, dict):
        return data.get("message") or data.get("msg") or response.reason or ""
    return response.reason or ""


class KieClient:
    """HTTP client for the Kie.ai job API. Bearer token auth."""

    def __init__(self, api_key: str, base_url: str = DEFAULT_BASE_URL):
        if not api_key:
            raise KieError("KIE_API_KEY is not configured")
        self.base_url = base_url.rstrip("/")
        self._session = requests.Session()
        self._session.headers.update({
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        })

    def create_sora_task(
        self,
        prompt: str,
        aspect_ratio: str = "landscape",
        n_frames: str = "10",
        remove_watermark: bool = True,
        callback_url: str | None = None,
    ) -> str:
        """
        Submit a Sora 2 text-to-video job.

        Args:
            prompt: Video prompt
            aspect_ratio: "landscape" or "portrait"
            n_frames: "10" or "15"
            remove_watermark: Ask the provider to strip its watermark
            callback_url: Optional URL the provider calls on completion

        Returns:
            The provider task id

        Raises:
            KieError: On HTTP failure or a reply without code 200 and a taskId
        """
        body: dict[str, Any] = {
            "model": SORA_MODEL,
            "input": {
                "prompt": prompt,
                "aspect_ratio": aspect_ratio,
                "n_frames": n_frames,
                "remove_watermark": remove_watermark,
            },
        }
        if callback_url:
            body["callBackUrl"] = callback_url

        result = self._request("POST", "/jobs/createTask", operation="create_task", json=body)
        task_id = (result.get("data") or {}).get("taskId")
        if result.get("code") != 200 or not task_id:
            raise KieError(result.get("message") or result.get("msg") or "Failed to create Sora task")

        logger.info("KIE_TASK_CREATED task_id=%s aspect_ratio=%s", task_id, aspect_ratio)
        return task_id

    def query_task_status(self, task_id: str) -> TaskStatus:
        """Fetch the current state of a job."""
        result = self._request(
            "GET",
            "/jobs/recordInfo",
            operation="record_info",
            params={"taskId": task_id},
        )
        data = result.get("data")
        if result.get("code") != 200 or not data:
            raise KieError(result.get("message") or result.get("msg") or "Failed to query task status")
        return TaskStatus.from_payload(data)

    def wait_for_task_completion(
        self,
        task_id: str,
        max_attempts: int = 60,
        interval_s: float = 5,
        sleep: Callable[[float], None] = time.sleep,
    ) -> TaskStatus:
        """
        Poll until the job succeeds or fails.

        Raises:
            KieTimeoutError: If max_attempts polls pass without a terminal state
        """
        for attempt in range(max_attempts):
            status = self.query_task_status(task_id)
            if status.is_terminal():
                logger.info(
                    "KIE_TASK_DONE task_id=%s state=%s attempts=%d",
                    task_id,
                    status.state,
                    attempt + 1,
                )
                return status
            logger.debug("Task still running: task_id=%s state=%s", task_id, status.state)
            sleep(interval_s)

        raise KieTimeoutError(f"Task {task_id} did not complete within timeout period")

    def _request(self, method: str, path: str, *, operation: str, **kwargs: Any) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        call_start_ms = time.monotonic() * 1000
        logger.info("KIE_CALL_START op=%s url=%s", operation, url)

        try:
            response = self._session.request(method, url, timeout=REQUEST_TIMEOUT_S, **kwargs)
        except requests.RequestException as e:
            duration_ms = int(time.monotonic() * 1000 - call_start_ms)
            logger.error(
                "KIE_CALL_ERROR op=%s status=NETWORK duration_ms=%d error=%s",
                operation,
                duration_ms,
                str(e),
            )
            raise KieError(f"Request to Kie.ai failed: {e}") from e

        duration_ms = int(time.monotonic() * 1000 - call_start_ms)
        if not response.ok:
            logger.error(
                "KIE_CALL_ERROR op=%s status=HTTP_ERROR duration_ms=%d http_status=%d error=%s",
                operation,
                duration_ms,
                response.status_code,
                response.text[:200],
            )
            raise KieError(
                _error_detail(response) or f"Kie.ai request failed with {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise KieError(
                "Kie.ai returned a non-JSON response",
                status_code=response.status_code,
                body=response.text,
            ) from e

        logger.info(
            "KIE_CALL_COMPLETE op=%s duration_ms=%d code=%s",
            operation,
            duration_ms,
            payload.get("code") if isinstance(payload, dict) else None,
        )
        return payload if isinstance(payload, dict) else {}


def get_default_client() -> KieClient:
    """
    Build a client from Django settings.

    Raises:
        KieError: If KIE_API_KEY is not set
    """
    return KieClient(
        api_key=getattr(settings, "KIE_API_KEY", ""),
        base_url=getattr(settings, "KIE_BASE_URL", DEFAULT_BASE_URL),
    )
