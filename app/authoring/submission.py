from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

import structlog

from app.authoring.banks import BankDraft, build_bank_payload
from app.authoring.diff import BankFormState, QuestionFormState, build_bank_patch, build_question_patch
from app.authoring.errors import (
    AuthoringValidationError,
    ExternalServiceError,
    NoChangesDetectedError,
    format_error_message,
)
from app.authoring.gateway import AuthoringGateway
from app.authoring.types import Question, QuestionBank
from app.authoring.validation import QuestionDraft, build_question_payload

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class SubmissionStatus(str, Enum):
    SUBMITTED = "SUBMITTED"
    INVALID = "INVALID"
    NO_CHANGES = "NO_CHANGES"
    FAILED = "FAILED"
    BUSY = "BUSY"


@dataclass(frozen=True, slots=True)
class SubmissionResult(Generic[T]):
    status: SubmissionStatus
    value: T | None = None
    code: str | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is SubmissionStatus.SUBMITTED


class AuthoringSession:
    """Submission edge for one editing session.

    Validation and no-change signals are resolved before any gateway call.
    Gateway failures become a FAILED result with a user-facing message. Drafts
    are immutable, so the caller still holds the exact input for a retry. Only
    one submission runs at a time per session.
    """

    def __init__(self, gateway: AuthoringGateway) -> None:
        self._gateway = gateway
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    async def _submit(
        self,
        operation: str,
        prepare: Callable[[], object],
        send: Callable[[object], Awaitable[T]],
    ) -> SubmissionResult[T]:
        if self._busy:
            return SubmissionResult(
                SubmissionStatus.BUSY,
                code="E_BUSY",
                message="A submission is already in progress.",
            )

        try:
            prepared = prepare()
        except NoChangesDetectedError as exc:
            return SubmissionResult(SubmissionStatus.NO_CHANGES, code=exc.code, message=exc.message)
        except AuthoringValidationError as exc:
            return SubmissionResult(SubmissionStatus.INVALID, code=exc.code, message=exc.message)

        self._busy = True
        try:
            value = await send(prepared)
        except ExternalServiceError as exc:
            logger.warning("authoring_submission_failed", operation=operation, error_code=exc.code)
            return SubmissionResult(SubmissionStatus.FAILED, code=exc.code, message=format_error_message(exc))
        finally:
            self._busy = False

        logger.info("authoring_submission_succeeded", operation=operation)
        return SubmissionResult(SubmissionStatus.SUBMITTED, value=value)

    async def create_question(self, draft: QuestionDraft) -> SubmissionResult[Question]:
        return await self._submit(
            "create_question",
            lambda: build_question_payload(draft),
            self._gateway.create_question,
        )

    async def update_question(self, original: Question, form: QuestionFormState) -> SubmissionResult[Question]:
        return await self._submit(
            "update_question",
            lambda: build_question_patch(original, form),
            lambda patch: self._gateway.update_question(original.question_id, patch),
        )

    async def create_question_bank(self, draft: BankDraft) -> SubmissionResult[QuestionBank]:
        return await self._submit(
            "create_question_bank",
            lambda: build_bank_payload(draft),
            self._gateway.create_question_bank,
        )

    async def update_question_bank(self, original: QuestionBank, form: BankFormState) -> SubmissionResult[QuestionBank]:
        return await self._submit(
            "update_question_bank",
            lambda: build_bank_patch(original, form),
            lambda patch: self._gateway.update_question_bank(original.bank_id, patch),
        )
