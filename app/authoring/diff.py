"""Minimal patches between a stored entity and its edited form state.

Patches use the persistence API field names and only carry top-level fields
whose normalised value differs from the original. A type change always
carries ``options`` because the option schema changes meaning with the type.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from app.authoring.errors import EmptyBankNameError, NoChangesDetectedError
from app.authoring.options import OptionSetState
from app.authoring.types import Difficulty, KnowledgeCategory, Option, Question, QuestionBank, QuestionType
from app.authoring.validation import QuestionDraft, normalize_options, parse_categories, validate_question


@dataclass(frozen=True, slots=True)
class QuestionFormState:
    text: str
    question_type: QuestionType
    options: tuple[Option, ...]
    categories: str | tuple[str, ...]
    difficulty: Difficulty | None = None
    knowledge_category: KnowledgeCategory | None = None
    explanation: str | None = None

    @classmethod
    def from_question(cls, question: Question) -> QuestionFormState:
        return cls(
            text=question.text,
            question_type=question.question_type,
            options=question.options,
            categories=question.categories,
            difficulty=question.difficulty,
            knowledge_category=question.knowledge_category,
            explanation=question.explanation,
        )

    def with_option_set(self, option_set: OptionSetState) -> QuestionFormState:
        return QuestionFormState(
            text=self.text,
            question_type=option_set.question_type,
            options=option_set.options,
            categories=self.categories,
            difficulty=self.difficulty,
            knowledge_category=self.knowledge_category,
            explanation=self.explanation,
        )

    def as_draft(self) -> QuestionDraft:
        return QuestionDraft(
            text=self.text,
            question_type=self.question_type,
            options=self.options,
            categories=self.categories,
            knowledge_category=self.knowledge_category,
            explanation=self.explanation,
            difficulty=self.difficulty,
        )


@dataclass(frozen=True, slots=True)
class BankFormState:
    name: str
    description: str = ""
    categories: tuple[str, ...] | None = None

    @classmethod
    def from_bank(cls, bank: QuestionBank) -> BankFormState:
        return cls(name=bank.name, description=bank.description or "", categories=bank.categories)


def _comparable_options(options: Sequence[Option]) -> list[tuple[str, bool]]:
    return [(option.text.strip(), bool(option.is_correct)) for option in options]


def _optional_text(value: str | None) -> str:
    return (value or "").strip()


def diff_question(original: Question, form: QuestionFormState) -> dict[str, object]:
    patch: dict[str, object] = {}

    if form.question_type is not original.question_type:
        patch["questionType"] = form.question_type.value
        patch["options"] = normalize_options(form.options)
    elif _comparable_options(form.options) != _comparable_options(original.options):
        patch["options"] = normalize_options(form.options)

    text = form.text.strip()
    if text != original.text.strip():
        patch["questionText"] = text

    categories = parse_categories(form.categories)
    if sorted(categories) != sorted(parse_categories(original.categories)):
        patch["categories"] = categories

    if form.difficulty != original.difficulty:
        patch["difficulty"] = form.difficulty.value if form.difficulty is not None else None

    if form.knowledge_category is not None and form.knowledge_category != original.knowledge_category:
        patch["knowledgeCategory"] = form.knowledge_category.value

    explanation = _optional_text(form.explanation)
    if explanation != _optional_text(original.explanation):
        patch["explanation"] = explanation or None

    return patch


def diff_bank(original: QuestionBank, form: BankFormState) -> dict[str, object]:
    patch: dict[str, object] = {}

    name = form.name.strip()
    if name != original.name.strip():
        patch["name"] = name

    description = form.description.strip()
    if description != _optional_text(original.description):
        patch["description"] = description

    if form.categories is not None:
        categories = parse_categories(form.categories)
        if sorted(categories) != sorted(parse_categories(original.categories)):
            patch["categories"] = categories

    return patch


def require_changes(patch: dict[str, object]) -> dict[str, object]:
    if not patch:
        raise NoChangesDetectedError()
    return patch


def build_question_patch(original: Question, form: QuestionFormState) -> dict[str, object]:
    validate_question(form.as_draft())
    return require_changes(diff_question(original, form))


def build_bank_patch(original: QuestionBank, form: BankFormState) -> dict[str, object]:
    if not form.name.strip():
        raise EmptyBankNameError()
    return require_changes(diff_bank(original, form))
