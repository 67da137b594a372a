from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.authoring.types import (
    BankMember,
    Difficulty,
    KnowledgeCategory,
    Option,
    Question,
    QuestionBank,
    QuestionOrigin,
    QuestionReference,
    QuestionStatus,
    QuestionType,
    ResolvedQuestion,
    SourceType,
)


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


def _blank_to_none(value: object) -> object:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class OptionWire(_WireModel):
    option_id: str | None = Field(default=None, alias="_id")
    text: str = ""
    is_correct: bool = Field(default=False, alias="isCorrect")

    def to_domain(self) -> Option:
        return Option(text=self.text, is_correct=self.is_correct, option_id=self.option_id)


class QuestionWire(_WireModel):
    question_id: str = Field(alias="_id")
    text: str = Field(alias="questionText")
    question_type: QuestionType = Field(alias="questionType")
    options: list[OptionWire] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    knowledge_category: KnowledgeCategory | None = Field(default=None, alias="knowledgeCategory")
    explanation: str | None = None
    difficulty: Difficulty | None = None
    status: QuestionStatus = QuestionStatus.ACTIVE
    created_by: QuestionOrigin = Field(default=QuestionOrigin.MANUAL, alias="createdBy")

    @field_validator("knowledge_category", "difficulty", "explanation", mode="before")
    @classmethod
    def blank_optional_to_none(cls, value: object) -> object:
        return _blank_to_none(value)

    def to_domain(self) -> Question:
        return Question(
            question_id=self.question_id,
            text=self.text,
            question_type=self.question_type,
            options=tuple(option.to_domain() for option in self.options),
            categories=tuple(self.categories),
            knowledge_category=self.knowledge_category,
            explanation=self.explanation,
            difficulty=self.difficulty,
            status=self.status,
            created_by=self.created_by,
        )


class QuestionBankWire(_WireModel):
    bank_id: str = Field(alias="_id")
    name: str
    description: str | None = None
    source_type: SourceType = Field(default=SourceType.MANUAL, alias="sourceType")
    categories: list[str] = Field(default_factory=list)
    source_menu_id: str | None = Field(default=None, alias="sourceMenuId")
    source_sop_document_id: str | None = Field(default=None, alias="sourceSopDocumentId")
    questions: list[str | QuestionWire] = Field(default_factory=list)
    question_count: int = Field(default=0, ge=0, alias="questionCount")

    def to_domain(self) -> QuestionBank:
        members: list[BankMember] = []
        for entry in self.questions:
            if isinstance(entry, QuestionWire):
                members.append(ResolvedQuestion(entry.to_domain()))
            else:
                members.append(QuestionReference(entry))
        return QuestionBank(
            bank_id=self.bank_id,
            name=self.name,
            description=self.description,
            source_type=self.source_type,
            categories=tuple(self.categories),
            source_menu_id=self.source_menu_id,
            source_sop_document_id=self.source_sop_document_id,
            members=tuple(members),
            question_count=len(members),
        )


def parse_question(payload: object) -> Question:
    return QuestionWire.model_validate(payload).to_domain()


def parse_questions(payload: object) -> list[Question]:
    if not isinstance(payload, list):
        raise ValueError("expected a list of questions")
    return [parse_question(item) for item in payload]


def parse_question_bank(payload: object) -> QuestionBank:
    return QuestionBankWire.model_validate(payload).to_domain()
