from __future__ import annotations

import pytest

from app.authoring.errors import EmptyCategoriesError, InvalidQuestionCountError
from app.authoring.generation import build_generation_params, max_questions_for
from app.authoring.types import SourceType


def test_generation_params_shape() -> None:
    params = build_generation_params(
        bank_id="b1",
        categories="Starters, Mains",
        target_question_count=10,
        menu_context="  Seasonal autumn menu ",
    )

    assert params == {
        "bankId": "b1",
        "categories": ["Starters", "Mains"],
        "targetQuestionCount": 10,
        "menuContext": "Seasonal autumn menu",
    }


def test_generation_params_omit_blank_context() -> None:
    params = build_generation_params(bank_id="b1", categories=["Wine"], target_question_count=1, menu_context=" ")
    assert "menuContext" not in params


def test_generation_requires_categories() -> None:
    with pytest.raises(EmptyCategoriesError):
        build_generation_params(bank_id="b1", categories=" , ", target_question_count=5)


@pytest.mark.parametrize("count", [0, -3, 31])
def test_generation_rejects_out_of_range_counts(count: int) -> None:
    with pytest.raises(InvalidQuestionCountError):
        build_generation_params(bank_id="b1", categories=["Opening"], target_question_count=count, max_questions=30)


def test_sop_generation_is_capped_at_thirty() -> None:
    assert max_questions_for(SourceType.SOP, 50) == 30
    assert max_questions_for(SourceType.SOP, 10) == 10
    assert max_questions_for(SourceType.MENU, 50) == 50
    assert max_questions_for(SourceType.MANUAL) == 50
