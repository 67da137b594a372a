from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class QuestionType(str, Enum):
    SINGLE_CHOICE = "multiple-choice-single"
    MULTIPLE_CHOICE = "multiple-choice-multiple"
    TRUE_FALSE = "true-false"

    @property
    def is_exclusive(self) -> bool:
        """True when exactly one option may be marked correct."""
        return self is not QuestionType.MULTIPLE_CHOICE


class KnowledgeCategory(str, Enum):
    FOOD = "food-knowledge"
    BEVERAGE = "beverage-knowledge"
    WINE = "wine-knowledge"
    PROCEDURES = "procedures-knowledge"


class QuestionStatus(str, Enum):
    ACTIVE = "active"
    PENDING_REVIEW = "pending_review"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class SourceType(str, Enum):
    MANUAL = "MANUAL"
    MENU = "MENU"
    SOP = "SOP"


class QuestionOrigin(str, Enum):
    AI = "ai"
    MANUAL = "manual"


@dataclass(frozen=True, slots=True)
class Option:
    text: str
    is_correct: bool = False
    option_id: str | None = None


@dataclass(frozen=True, slots=True)
class Question:
    question_id: str
    text: str
    question_type: QuestionType
    options: tuple[Option, ...]
    categories: tuple[str, ...]
    knowledge_category: KnowledgeCategory | None = None
    explanation: str | None = None
    difficulty: Difficulty | None = None
    status: QuestionStatus = QuestionStatus.ACTIVE
    created_by: QuestionOrigin = QuestionOrigin.MANUAL

    @property
    def is_pending_review(self) -> bool:
        return self.status is QuestionStatus.PENDING_REVIEW


@dataclass(frozen=True, slots=True)
class QuestionReference:
    question_id: str


@dataclass(frozen=True, slots=True)
class ResolvedQuestion:
    question: Question

    @property
    def question_id(self) -> str:
        return self.question.question_id


BankMember = QuestionReference | ResolvedQuestion


def resolve_member(member: BankMember, lookup: dict[str, Question]) -> Question | None:
    """Returns the populated question for a bank member, or None when unknown."""
    if isinstance(member, ResolvedQuestion):
        return member.question
    return lookup.get(member.question_id)


@dataclass(frozen=True, slots=True)
class QuestionBank:
    bank_id: str
    name: str
    source_type: SourceType
    description: str | None = None
    categories: tuple[str, ...] = ()
    source_menu_id: str | None = None
    source_sop_document_id: str | None = None
    members: tuple[BankMember, ...] = ()
    question_count: int = 0

    @property
    def member_ids(self) -> tuple[str, ...]:
        return tuple(member.question_id for member in self.members)


@dataclass(frozen=True, slots=True)
class CategoryTreeNode:
    name: str
    full_name: str
    children: tuple[CategoryTreeNode, ...] = field(default_factory=tuple)
