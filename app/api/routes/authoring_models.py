from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.authoring.banks import BankDraft
from app.authoring.diff import QuestionFormState
from app.authoring.types import Difficulty, KnowledgeCategory, QuestionType, SourceType
from app.authoring.validation import QuestionDraft
from app.authoring.wire import OptionWire, QuestionWire


class _RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class QuestionDraftRequest(_RequestModel):
    question_text: str = Field(default="", alias="questionText")
    question_type: QuestionType = Field(alias="questionType")
    options: list[OptionWire] = Field(default_factory=list, max_length=16)
    categories: list[str] | str = Field(default_factory=list)
    difficulty: Difficulty | None = None
    knowledge_category: KnowledgeCategory | None = Field(default=None, alias="knowledgeCategory")
    explanation: str | None = None

    def category_input(self) -> str | tuple[str, ...]:
        return self.categories if isinstance(self.categories, str) else tuple(self.categories)

    def to_draft(self) -> QuestionDraft:
        return QuestionDraft(
            text=self.question_text,
            question_type=self.question_type,
            options=tuple(option.to_domain() for option in self.options),
            categories=self.category_input(),
            knowledge_category=self.knowledge_category,
            explanation=self.explanation,
            difficulty=self.difficulty,
        )

    def to_form_state(self) -> QuestionFormState:
        return QuestionFormState(
            text=self.question_text,
            question_type=self.question_type,
            options=tuple(option.to_domain() for option in self.options),
            categories=self.category_input(),
            difficulty=self.difficulty,
            knowledge_category=self.knowledge_category,
            explanation=self.explanation,
        )


class QuestionDiffRequest(_RequestModel):
    original: QuestionWire
    form: QuestionDraftRequest


class BankDraftRequest(_RequestModel):
    name: str = ""
    description: str = ""
    source_type: SourceType = Field(alias="sourceType")
    source_menu_id: str | None = Field(default=None, alias="sourceMenuId")
    source_sop_document_id: str | None = Field(default=None, alias="sourceSopDocumentId")
    categories: list[str] = Field(default_factory=list)
    beverage_categories: list[str] = Field(default_factory=list, alias="beverageCategories")

    def to_draft(self) -> BankDraft:
        return BankDraft(
            name=self.name,
            description=self.description,
            source_type=self.source_type,
            source_menu_id=self.source_menu_id,
            source_sop_document_id=self.source_sop_document_id,
            categories=tuple(self.categories),
            beverage_categories=tuple(self.beverage_categories),
        )


class CategoryToggleRequest(_RequestModel):
    tree: list[dict[str, Any]]
    selected: list[str] = Field(default_factory=list)
    full_name: str = Field(alias="fullName")


class MenuCategorySplitRequest(_RequestModel):
    categories: list[str]


class ValidationResponse(BaseModel):
    valid: bool
    payload: dict[str, Any]


class QuestionDiffResponse(BaseModel):
    changed: bool
    patch: dict[str, Any]


class CategoryToggleResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    selected: list[str]
    all_selected: bool = Field(alias="allSelected")


class MenuCategorySplitResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    item_categories: list[str] = Field(alias="itemCategories")
    beverage_categories: list[str] = Field(alias="beverageCategories")


class GenerationParamsRequest(_RequestModel):
    bank_id: str = Field(alias="bankId", min_length=1)
    source_type: SourceType = Field(default=SourceType.MENU, alias="sourceType")
    categories: list[str] | str = Field(default_factory=list)
    target_question_count: int = Field(alias="targetQuestionCount")
    menu_context: str | None = Field(default=None, alias="menuContext")
