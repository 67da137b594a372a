from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol

from app.authoring.types import Question, QuestionBank


class AuthoringGateway(Protocol):
    """Persistence boundary consumed by the authoring core.

    Implementations raise ``ExternalServiceError`` for any remote failure.
    """

    async def create_question(self, payload: Mapping[str, object]) -> Question: ...

    async def update_question(self, question_id: str, patch: Mapping[str, object]) -> Question: ...

    async def remove_question_from_bank(self, bank_id: str, question_id: str) -> QuestionBank: ...

    async def create_question_bank(self, payload: Mapping[str, object]) -> QuestionBank: ...

    async def update_question_bank(self, bank_id: str, patch: Mapping[str, object]) -> QuestionBank: ...

    async def generate_ai_questions(self, params: Mapping[str, object]) -> list[Question]: ...

    async def process_reviewed_ai_questions(
        self,
        bank_id: str,
        *,
        accepted_ids: Sequence[str],
        deleted_ids: Sequence[str],
    ) -> QuestionBank: ...
