"""Option list state for a question being drafted or edited.

Every edit goes through :func:`transition`, which takes the current state and
one action and returns the next state. Bounded actions (adding past the
maximum, removing below the minimum, touching true/false texts, indexes out
of range) return the state unchanged instead of raising, so repeated UI
triggers cannot corrupt the option list.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from app.authoring.constants import FALSE_OPTION_TEXT, MAX_OPTIONS, MIN_OPTIONS, TRUE_OPTION_TEXT
from app.authoring.types import Option, Question, QuestionType


@dataclass(frozen=True, slots=True)
class OptionSetState:
    question_type: QuestionType
    options: tuple[Option, ...]
    original_type: QuestionType | None = None
    original_options: tuple[Option, ...] = ()

    @property
    def can_add(self) -> bool:
        return self.question_type is not QuestionType.TRUE_FALSE and len(self.options) < MAX_OPTIONS

    @property
    def can_remove(self) -> bool:
        return self.question_type is not QuestionType.TRUE_FALSE and len(self.options) > MIN_OPTIONS

    @property
    def correct_count(self) -> int:
        return sum(1 for option in self.options if option.is_correct)


@dataclass(frozen=True, slots=True)
class SetType:
    question_type: QuestionType


@dataclass(frozen=True, slots=True)
class AddOption:
    pass


@dataclass(frozen=True, slots=True)
class RemoveOption:
    index: int


@dataclass(frozen=True, slots=True)
class SetCorrect:
    index: int
    value: bool


@dataclass(frozen=True, slots=True)
class SetOptionText:
    index: int
    text: str


OptionAction = SetType | AddOption | RemoveOption | SetCorrect | SetOptionText


def canonical_options(question_type: QuestionType) -> tuple[Option, ...]:
    if question_type is QuestionType.TRUE_FALSE:
        return (
            Option(text=TRUE_OPTION_TEXT, is_correct=True),
            Option(text=FALSE_OPTION_TEXT, is_correct=False),
        )
    return tuple(Option(text="", is_correct=False) for _ in range(MIN_OPTIONS))


def new_option_set(question_type: QuestionType = QuestionType.SINGLE_CHOICE) -> OptionSetState:
    return OptionSetState(question_type=question_type, options=canonical_options(question_type))


def option_set_for(question: Question) -> OptionSetState:
    return OptionSetState(
        question_type=question.question_type,
        options=question.options,
        original_type=question.question_type,
        original_options=question.options,
    )


def _in_range(state: OptionSetState, index: int) -> bool:
    return 0 <= index < len(state.options)


def _set_type(state: OptionSetState, question_type: QuestionType) -> OptionSetState:
    if question_type is state.question_type:
        return state
    if state.original_type is not None and question_type is state.original_type:
        return replace(state, question_type=question_type, options=state.original_options)
    return replace(state, question_type=question_type, options=canonical_options(question_type))


def _add_option(state: OptionSetState) -> OptionSetState:
    if not state.can_add:
        return state
    return replace(state, options=(*state.options, Option(text="", is_correct=False)))


def _remove_option(state: OptionSetState, index: int) -> OptionSetState:
    if not state.can_remove or not _in_range(state, index):
        return state
    return replace(state, options=state.options[:index] + state.options[index + 1 :])


def _set_correct(state: OptionSetState, index: int, value: bool) -> OptionSetState:
    if not _in_range(state, index):
        return state
    if state.question_type.is_exclusive and value:
        options = tuple(
            replace(option, is_correct=position == index) for position, option in enumerate(state.options)
        )
    else:
        options = tuple(
            replace(option, is_correct=value) if position == index else option
            for position, option in enumerate(state.options)
        )
    return replace(state, options=options)


def _set_option_text(state: OptionSetState, index: int, text: str) -> OptionSetState:
    if state.question_type is QuestionType.TRUE_FALSE or not _in_range(state, index):
        return state
    options = tuple(
        replace(option, text=text) if position == index else option for position, option in enumerate(state.options)
    )
    return replace(state, options=options)


def transition(state: OptionSetState, action: OptionAction) -> OptionSetState:
    if isinstance(action, SetType):
        return _set_type(state, action.question_type)
    if isinstance(action, AddOption):
        return _add_option(state)
    if isinstance(action, RemoveOption):
        return _remove_option(state, action.index)
    if isinstance(action, SetCorrect):
        return _set_correct(state, action.index, action.value)
    if isinstance(action, SetOptionText):
        return _set_option_text(state, action.index, action.text)
    raise TypeError(f"unsupported option action: {action!r}")


def set_type(state: OptionSetState, question_type: QuestionType) -> OptionSetState:
    return transition(state, SetType(question_type))


def add_option(state: OptionSetState) -> OptionSetState:
    return transition(state, AddOption())


def remove_option(state: OptionSetState, index: int) -> OptionSetState:
    return transition(state, RemoveOption(index))


def set_correct(state: OptionSetState, index: int, value: bool) -> OptionSetState:
    return transition(state, SetCorrect(index, value))


def set_option_text(state: OptionSetState, index: int, text: str) -> OptionSetState:
    return transition(state, SetOptionText(index, text))
