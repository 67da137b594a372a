from __future__ import annotations

from collections.abc import Sequence

from app.authoring.constants import DEFAULT_MAX_GENERATED_QUESTIONS, MAX_SOP_GENERATED_QUESTIONS
from app.authoring.errors import EmptyCategoriesError, InvalidQuestionCountError
from app.authoring.types import SourceType
from app.authoring.validation import parse_categories


def max_questions_for(source_type: SourceType, configured_max: int = DEFAULT_MAX_GENERATED_QUESTIONS) -> int:
    if source_type is SourceType.SOP:
        return min(configured_max, MAX_SOP_GENERATED_QUESTIONS)
    return configured_max


def build_generation_params(
    *,
    bank_id: str,
    categories: str | Sequence[str],
    target_question_count: int,
    menu_context: str | None = None,
    max_questions: int = DEFAULT_MAX_GENERATED_QUESTIONS,
) -> dict[str, object]:
    parsed_categories = parse_categories(categories)
    if not parsed_categories:
        raise EmptyCategoriesError("Please provide at least one category for AI generation.")
    if target_question_count <= 0:
        raise InvalidQuestionCountError()
    if target_question_count > max_questions:
        raise InvalidQuestionCountError(f"Question count must be between 1 and {max_questions}.")

    params: dict[str, object] = {
        "bankId": bank_id,
        "categories": parsed_categories,
        "targetQuestionCount": target_question_count,
    }
    context = (menu_context or "").strip()
    if context:
        params["menuContext"] = context
    return params
