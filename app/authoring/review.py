from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, replace

import structlog

from app.authoring.diff import QuestionFormState, build_question_patch
from app.authoring.errors import BatchInProgressError, NoQuestionsGeneratedError, UnknownQuestionError
from app.authoring.gateway import AuthoringGateway
from app.authoring.types import (
    BankMember,
    Question,
    QuestionBank,
    QuestionOrigin,
    QuestionStatus,
    ResolvedQuestion,
    resolve_member,
)

logger = structlog.get_logger(__name__)

BankChangedCallback = Callable[[QuestionBank], None]


@dataclass(frozen=True, slots=True)
class BulkResult:
    succeeded_ids: tuple[str, ...]
    failed_ids: tuple[str, ...]

    @property
    def succeeded_count(self) -> int:
        return len(self.succeeded_ids)

    @property
    def failed_count(self) -> int:
        return len(self.failed_ids)

    @property
    def all_succeeded(self) -> bool:
        return not self.failed_ids


def recount_members(bank: QuestionBank) -> QuestionBank:
    if bank.question_count == len(bank.members):
        return bank
    return replace(bank, question_count=len(bank.members))


def _unique_ids(question_ids: Sequence[str]) -> list[str]:
    return list(dict.fromkeys(question_ids))


class ReviewWorkflowController:
    """Review state of one bank: AI generation, approval, rejection and edits of its questions.

    Bulk operations run item by item against the gateway. A failed item is
    logged and reported in the result; the rest of the batch still runs. The
    bank's ``question_count`` is recomputed from its member list after every
    applied change.
    """

    def __init__(
        self,
        gateway: AuthoringGateway,
        *,
        bank: QuestionBank,
        questions: Sequence[Question] = (),
        on_bank_changed: BankChangedCallback | None = None,
    ) -> None:
        self._gateway = gateway
        self._on_bank_changed = on_bank_changed
        self._questions: dict[str, Question] = {}
        for member in bank.members:
            if isinstance(member, ResolvedQuestion):
                self._questions[member.question_id] = member.question
        for question in questions:
            self._questions[question.question_id] = question
        self._bank = recount_members(bank)
        self._busy = False
        self._generating = False
        self._generation_token = 0

    @property
    def bank(self) -> QuestionBank:
        return self._bank

    @property
    def busy(self) -> bool:
        return self._busy

    def get_question(self, question_id: str) -> Question | None:
        return self._questions.get(question_id)

    def member_questions(self) -> list[Question]:
        resolved = (resolve_member(member, self._questions) for member in self._bank.members)
        return [question for question in resolved if question is not None]

    def pending_questions(self) -> list[Question]:
        return [question for question in self.member_questions() if question.is_pending_review]

    @property
    def pending_count(self) -> int:
        return len(self.pending_questions())

    @property
    def active_count(self) -> int:
        # Members known only by id have no status yet and count as neither.
        return sum(1 for question in self.member_questions() if not question.is_pending_review)

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        if self._busy:
            raise BatchInProgressError()
        self._busy = True
        try:
            yield
        finally:
            self._busy = False

    def _notify(self) -> None:
        if self._on_bank_changed is not None:
            self._on_bank_changed(self._bank)

    def _apply_bank(self, bank: QuestionBank, *, removed_id: str | None = None) -> None:
        members: tuple[BankMember, ...] = bank.members
        if removed_id is not None:
            members = tuple(member for member in members if member.question_id != removed_id)
        self._bank = recount_members(replace(bank, members=members))

    def _add_members(self, questions: Sequence[Question]) -> None:
        known = set(self._bank.member_ids)
        additions = tuple(
            ResolvedQuestion(question) for question in questions if question.question_id not in known
        )
        if additions:
            self._bank = recount_members(replace(self._bank, members=self._bank.members + additions))

    def abandon_generation(self) -> None:
        """Stops waiting for an in-flight generation; its response will be discarded."""
        if not self._generating:
            return
        self._generation_token += 1
        self._generating = False
        self._busy = False
        logger.info("ai_generation_abandoned", bank_id=self._bank.bank_id)

    async def generate(self, params: Mapping[str, object]) -> list[Question]:
        if self._busy:
            raise BatchInProgressError()
        self._generation_token += 1
        token = self._generation_token
        self._busy = True
        self._generating = True
        try:
            generated = await self._gateway.generate_ai_questions(params)
        finally:
            if token == self._generation_token:
                self._generating = False
                self._busy = False

        if token != self._generation_token:
            logger.info(
                "ai_generation_discarded",
                bank_id=self._bank.bank_id,
                discarded_count=len(generated),
            )
            return []
        if not generated:
            raise NoQuestionsGeneratedError()

        pending = [
            replace(question, status=QuestionStatus.PENDING_REVIEW, created_by=QuestionOrigin.AI)
            for question in generated
        ]
        for question in pending:
            self._questions[question.question_id] = question
        self._add_members(pending)
        logger.info("ai_generation_received", bank_id=self._bank.bank_id, generated_count=len(pending))
        self._notify()
        return pending

    async def approve(self, question_ids: Sequence[str]) -> BulkResult:
        succeeded: list[str] = []
        failed: list[str] = []
        with self._exclusive():
            for question_id in _unique_ids(question_ids):
                question = self._questions.get(question_id)
                if question is not None and not question.is_pending_review:
                    succeeded.append(question_id)
                    continue
                try:
                    bank = await self._gateway.process_reviewed_ai_questions(
                        self._bank.bank_id,
                        accepted_ids=[question_id],
                        deleted_ids=[],
                    )
                except Exception:
                    logger.exception(
                        "review_item_failed",
                        action="approve",
                        bank_id=self._bank.bank_id,
                        question_id=question_id,
                    )
                    failed.append(question_id)
                    continue
                if question is not None:
                    approved = replace(question, status=QuestionStatus.ACTIVE)
                    self._questions[question_id] = approved
                    bank = _replace_resolved_member(bank, approved)
                self._apply_bank(bank)
                succeeded.append(question_id)

        return self._finish_batch("approve", succeeded, failed)

    async def reject_or_delete(self, question_ids: Sequence[str]) -> BulkResult:
        succeeded: list[str] = []
        failed: list[str] = []
        with self._exclusive():
            for question_id in _unique_ids(question_ids):
                question = self._questions.get(question_id)
                try:
                    if question is None or question.is_pending_review:
                        bank = await self._gateway.process_reviewed_ai_questions(
                            self._bank.bank_id,
                            accepted_ids=[],
                            deleted_ids=[question_id],
                        )
                    else:
                        bank = await self._gateway.remove_question_from_bank(self._bank.bank_id, question_id)
                except Exception:
                    logger.exception(
                        "review_item_failed",
                        action="reject_or_delete",
                        bank_id=self._bank.bank_id,
                        question_id=question_id,
                    )
                    failed.append(question_id)
                    continue
                self._questions.pop(question_id, None)
                self._apply_bank(bank, removed_id=question_id)
                succeeded.append(question_id)

        return self._finish_batch("reject_or_delete", succeeded, failed)

    async def edit_question(self, question_id: str, form: QuestionFormState) -> Question:
        original = self._questions.get(question_id)
        if original is None:
            raise UnknownQuestionError()
        patch = build_question_patch(original, form)
        with self._exclusive():
            updated = await self._gateway.update_question(question_id, patch)
        updated = replace(updated, status=original.status)
        self._questions[question_id] = updated
        self._bank = _replace_resolved_member(self._bank, updated)
        logger.info(
            "review_question_edited",
            bank_id=self._bank.bank_id,
            question_id=question_id,
            fields=sorted(patch),
        )
        return updated

    def _finish_batch(self, action: str, succeeded: list[str], failed: list[str]) -> BulkResult:
        result = BulkResult(succeeded_ids=tuple(succeeded), failed_ids=tuple(failed))
        logger.info(
            "review_batch_processed",
            action=action,
            bank_id=self._bank.bank_id,
            succeeded_count=result.succeeded_count,
            failed_count=result.failed_count,
            question_count=self._bank.question_count,
        )
        if succeeded:
            self._notify()
        return result


def _replace_resolved_member(bank: QuestionBank, question: Question) -> QuestionBank:
    members = tuple(
        ResolvedQuestion(question)
        if member.question_id == question.question_id
        else member
        for member in bank.members
    )
    return replace(bank, members=members)
