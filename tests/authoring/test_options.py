from __future__ import annotations

import pytest

from app.authoring.options import (
    AddOption,
    RemoveOption,
    SetCorrect,
    SetOptionText,
    SetType,
    add_option,
    canonical_options,
    new_option_set,
    option_set_for,
    remove_option,
    set_correct,
    set_option_text,
    set_type,
    transition,
)
from app.authoring.types import Option, Question, QuestionType


def _question(question_type: QuestionType, *options: Option) -> Question:
    return Question(
        question_id="q1",
        text="Which wine pairs with fish?",
        question_type=question_type,
        options=options,
        categories=("Wine",),
    )


def test_new_single_choice_set_has_two_blank_options() -> None:
    state = new_option_set()

    assert state.question_type == QuestionType.SINGLE_CHOICE
    assert [option.text for option in state.options] == ["", ""]
    assert state.correct_count == 0
    assert state.can_add is True
    assert state.can_remove is False


def test_true_false_set_is_canonical() -> None:
    state = new_option_set(QuestionType.TRUE_FALSE)

    assert [(option.text, option.is_correct) for option in state.options] == [("True", True), ("False", False)]
    assert state.can_add is False
    assert state.can_remove is False


def test_add_option_stops_at_six() -> None:
    state = new_option_set(QuestionType.MULTIPLE_CHOICE)
    for _ in range(10):
        state = add_option(state)

    assert len(state.options) == 6
    assert state.can_add is False
    assert add_option(state) is state


def test_remove_option_keeps_minimum_of_two() -> None:
    state = add_option(new_option_set())
    state = remove_option(state, 0)
    assert len(state.options) == 2

    assert remove_option(state, 0) is state


def test_remove_option_out_of_range_is_noop() -> None:
    state = add_option(new_option_set())
    assert remove_option(state, 7) is state
    assert remove_option(state, -1) is state


def test_true_false_rejects_add_remove_and_text_edits() -> None:
    state = new_option_set(QuestionType.TRUE_FALSE)

    assert add_option(state) is state
    assert remove_option(state, 0) is state
    assert set_option_text(state, 0, "Yes") is state


def test_single_choice_set_correct_uses_radio_semantics() -> None:
    state = add_option(new_option_set())
    state = set_correct(state, 0, True)
    state = set_correct(state, 2, True)

    assert [option.is_correct for option in state.options] == [False, False, True]
    assert state.correct_count == 1


def test_true_false_set_correct_flips_the_pair() -> None:
    state = set_correct(new_option_set(QuestionType.TRUE_FALSE), 1, True)

    assert [option.is_correct for option in state.options] == [False, True]


def test_single_choice_can_clear_the_correct_option() -> None:
    state = set_correct(new_option_set(), 0, True)
    state = set_correct(state, 0, False)

    assert state.correct_count == 0


def test_multiple_choice_set_correct_is_independent() -> None:
    state = add_option(new_option_set(QuestionType.MULTIPLE_CHOICE))
    state = set_correct(state, 0, True)
    state = set_correct(state, 2, True)
    state = set_correct(state, 0, False)

    assert [option.is_correct for option in state.options] == [False, False, True]


def test_set_option_text_updates_only_target() -> None:
    state = set_option_text(new_option_set(), 1, "Sauvignon Blanc")

    assert [option.text for option in state.options] == ["", "Sauvignon Blanc"]
    assert set_option_text(state, 5, "ignored") is state


def test_set_type_to_other_type_resets_to_canonical_options() -> None:
    state = set_option_text(new_option_set(), 0, "Merlot")
    state = set_type(state, QuestionType.TRUE_FALSE)

    assert state.question_type == QuestionType.TRUE_FALSE
    assert [option.text for option in state.options] == ["True", "False"]

    state = set_type(state, QuestionType.MULTIPLE_CHOICE)
    assert [option.text for option in state.options] == ["", ""]
    assert state.correct_count == 0


def test_set_type_to_current_type_is_noop() -> None:
    state = set_option_text(new_option_set(), 0, "Merlot")
    assert set_type(state, QuestionType.SINGLE_CHOICE) is state


def test_set_type_back_to_original_restores_stored_options() -> None:
    stored = (
        Option(text="Chablis", is_correct=True, option_id="o1"),
        Option(text="Malbec", is_correct=False, option_id="o2"),
        Option(text="Shiraz", is_correct=False, option_id="o3"),
    )
    state = option_set_for(_question(QuestionType.SINGLE_CHOICE, *stored))

    state = set_type(state, QuestionType.TRUE_FALSE)
    state = set_type(state, QuestionType.SINGLE_CHOICE)

    assert state.options == stored


def test_transition_dispatches_action_objects() -> None:
    state = new_option_set(QuestionType.MULTIPLE_CHOICE)
    for action in (
        AddOption(),
        SetOptionText(0, "Basil"),
        SetOptionText(1, "Thyme"),
        SetOptionText(2, "Chives"),
        SetCorrect(0, True),
        SetCorrect(1, True),
        RemoveOption(2),
    ):
        state = transition(state, action)

    assert [(option.text, option.is_correct) for option in state.options] == [("Basil", True), ("Thyme", True)]
    assert transition(state, SetType(QuestionType.MULTIPLE_CHOICE)) is state


def test_transition_rejects_unknown_action() -> None:
    with pytest.raises(TypeError):
        transition(new_option_set(), "add")  # type: ignore[arg-type]


def test_edits_never_mutate_previous_state() -> None:
    before = new_option_set()
    after = set_option_text(set_correct(before, 0, True), 0, "Changed")

    assert before.options == (Option(text=""), Option(text=""))
    assert after is not before


@pytest.mark.parametrize("start", list(QuestionType))
@pytest.mark.parametrize("target", list(QuestionType))
def test_set_type_always_yields_canonical_shape(start: QuestionType, target: QuestionType) -> None:
    state = set_option_text(add_option(new_option_set(start)), 0, "edited")
    if start is target:
        return
    assert set_type(state, target).options == canonical_options(target)


def test_new_question_round_trip_through_true_false() -> None:
    state = set_type(new_option_set(), QuestionType.TRUE_FALSE)
    assert [(option.text, option.is_correct) for option in state.options] == [("True", True), ("False", False)]

    state = set_type(state, QuestionType.SINGLE_CHOICE)
    assert [(option.text, option.is_correct) for option in state.options] == [("", False), ("", False)]


@pytest.mark.parametrize("question_type", [QuestionType.SINGLE_CHOICE, QuestionType.TRUE_FALSE])
def test_exclusive_types_never_have_two_correct_options(question_type: QuestionType) -> None:
    state = new_option_set(question_type)
    for _ in range(4):
        state = add_option(state)
    for index, value in [(0, True), (1, True), (3, True), (1, False), (2, True), (9, True), (0, True)]:
        state = set_correct(state, index, value)
        assert state.correct_count <= 1


def test_option_count_stays_within_bounds() -> None:
    state = new_option_set(QuestionType.MULTIPLE_CHOICE)
    for step in range(30):
        state = add_option(state) if step % 3 else remove_option(state, 0)
        assert 2 <= len(state.options) <= 6
    for _ in range(10):
        state = remove_option(state, len(state.options) - 1)
    assert len(state.options) == 2
