from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeVar

import httpx
import structlog
from pydantic import ValidationError

from app.authoring.errors import ExternalServiceError
from app.authoring.types import Question, QuestionBank
from app.authoring.wire import parse_question, parse_question_bank, parse_questions
from app.core.config import Settings, get_settings

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def _error_from_response(response: httpx.Response) -> ExternalServiceError:
    server_message: str | None = None
    server_errors: dict[str, object] = {}
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        raw_message = body.get("message")
        if isinstance(raw_message, str) and raw_message.strip():
            server_message = raw_message.strip()
        raw_errors = body.get("errors")
        if isinstance(raw_errors, dict):
            server_errors = raw_errors
    return ExternalServiceError(
        status_code=response.status_code,
        server_message=server_message,
        server_errors=server_errors,
    )


class AuthoringApiClient:
    """httpx implementation of the authoring persistence gateway."""

    def __init__(
        self,
        *,
        base_url: str,
        token: str = "",
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> AuthoringApiClient:
        resolved = settings or get_settings()
        return cls(
            base_url=resolved.authoring_api_base_url,
            token=resolved.authoring_api_token,
            timeout_seconds=resolved.authoring_api_timeout_seconds,
            transport=transport,
        )

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _request(self, method: str, path: str, *, body: Mapping[str, Any] | None = None) -> Any:
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                headers=self._headers(),
                timeout=self._timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.request(method, path, json=dict(body) if body is not None else None)
        except httpx.HTTPError as exc:
            logger.warning("authoring_api_request_failed", method=method, path=path, error=str(exc))
            raise ExternalServiceError() from exc

        if response.is_error:
            error = _error_from_response(response)
            logger.warning(
                "authoring_api_error_response",
                method=method,
                path=path,
                status_code=response.status_code,
                server_message=error.server_message,
            )
            raise error

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("authoring_api_invalid_json", method=method, path=path)
            raise ExternalServiceError(status_code=response.status_code) from exc
        if isinstance(payload, dict) and "data" in payload:
            return payload["data"]
        return payload

    async def _call(
        self,
        method: str,
        path: str,
        parse: Callable[[object], T],
        *,
        body: Mapping[str, Any] | None = None,
    ) -> T:
        data = await self._request(method, path, body=body)
        try:
            return parse(data)
        except (ValidationError, ValueError) as exc:
            logger.warning("authoring_api_unexpected_payload", method=method, path=path)
            raise ExternalServiceError("Unexpected response from the authoring service.") from exc

    async def create_question(self, payload: Mapping[str, object]) -> Question:
        return await self._call("POST", "/questions", parse_question, body=payload)

    async def update_question(self, question_id: str, patch: Mapping[str, object]) -> Question:
        return await self._call("PATCH", f"/questions/{question_id}", parse_question, body=patch)

    async def remove_question_from_bank(self, bank_id: str, question_id: str) -> QuestionBank:
        return await self._call(
            "DELETE",
            f"/question-banks/{bank_id}/questions/{question_id}",
            parse_question_bank,
        )

    async def create_question_bank(self, payload: Mapping[str, object]) -> QuestionBank:
        return await self._call("POST", "/question-banks", parse_question_bank, body=payload)

    async def update_question_bank(self, bank_id: str, patch: Mapping[str, object]) -> QuestionBank:
        return await self._call("PATCH", f"/question-banks/{bank_id}", parse_question_bank, body=patch)

    async def generate_ai_questions(self, params: Mapping[str, object]) -> list[Question]:
        return await self._call("POST", "/questions/generate", parse_questions, body=params)

    async def process_reviewed_ai_questions(
        self,
        bank_id: str,
        *,
        accepted_ids: Sequence[str],
        deleted_ids: Sequence[str],
    ) -> QuestionBank:
        body = {
            "acceptedQuestions": [{"_id": question_id} for question_id in accepted_ids],
            "updatedQuestions": [],
            "deletedQuestionIds": list(deleted_ids),
        }
        return await self._call(
            "POST",
            f"/question-banks/{bank_id}/process-reviewed-questions",
            parse_question_bank,
            body=body,
        )
