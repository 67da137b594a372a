from __future__ import annotations

import structlog
from fastapi import APIRouter, HTTPException

from app.api.routes.authoring_models import (
    BankDraftRequest,
    CategoryToggleRequest,
    CategoryToggleResponse,
    GenerationParamsRequest,
    MenuCategorySplitRequest,
    MenuCategorySplitResponse,
    QuestionDiffRequest,
    QuestionDiffResponse,
    QuestionDraftRequest,
    ValidationResponse,
)
from app.authoring.banks import build_bank_payload
from app.authoring.category_tree import CategorySelection, build_category_tree, split_menu_categories
from app.authoring.diff import diff_question
from app.authoring.errors import AuthoringValidationError
from app.authoring.generation import build_generation_params, max_questions_for
from app.authoring.validation import build_question_payload, validate_question
from app.core.config import get_beverage_category_keywords, get_settings

router = APIRouter(prefix="/authoring", tags=["authoring"])
logger = structlog.get_logger(__name__)


def _unprocessable(exc: AuthoringValidationError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={"code": exc.code, "message": exc.message},
    )


@router.post("/questions/validate", response_model=ValidationResponse)
async def validate_question_draft(body: QuestionDraftRequest) -> ValidationResponse:
    try:
        payload = build_question_payload(body.to_draft())
    except AuthoringValidationError as exc:
        logger.info("authoring_question_rejected", error_code=exc.code)
        raise _unprocessable(exc) from exc
    return ValidationResponse(valid=True, payload=payload)


@router.post("/questions/diff", response_model=QuestionDiffResponse)
async def diff_question_form(body: QuestionDiffRequest) -> QuestionDiffResponse:
    form = body.form.to_form_state()
    try:
        validate_question(form.as_draft())
    except AuthoringValidationError as exc:
        logger.info("authoring_question_rejected", error_code=exc.code, question_id=body.original.question_id)
        raise _unprocessable(exc) from exc
    patch = diff_question(body.original.to_domain(), form)
    return QuestionDiffResponse(changed=bool(patch), patch=patch)


@router.post("/banks/validate", response_model=ValidationResponse)
async def validate_bank_draft(body: BankDraftRequest) -> ValidationResponse:
    try:
        payload = build_bank_payload(body.to_draft())
    except AuthoringValidationError as exc:
        logger.info("authoring_bank_rejected", error_code=exc.code)
        raise _unprocessable(exc) from exc
    return ValidationResponse(valid=True, payload=payload)


@router.post("/category-tree/toggle", response_model=CategoryToggleResponse)
async def toggle_category(body: CategoryToggleRequest) -> CategoryToggleResponse:
    selection = CategorySelection(
        roots=build_category_tree(body.tree),
        selected=frozenset(body.selected),
    ).toggle(body.full_name)
    return CategoryToggleResponse(selected=selection.selected_names(), all_selected=selection.all_selected)


@router.post("/menu-categories/split", response_model=MenuCategorySplitResponse)
async def split_menu_category_names(body: MenuCategorySplitRequest) -> MenuCategorySplitResponse:
    item_categories, beverage_categories = split_menu_categories(
        body.categories,
        get_beverage_category_keywords(),
    )
    return MenuCategorySplitResponse(
        item_categories=item_categories,
        beverage_categories=beverage_categories,
    )


@router.post("/generation/params", response_model=ValidationResponse)
async def validate_generation_params(body: GenerationParamsRequest) -> ValidationResponse:
    max_questions = max_questions_for(body.source_type, get_settings().ai_generation_max_questions)
    try:
        params = build_generation_params(
            bank_id=body.bank_id,
            categories=body.categories,
            target_question_count=body.target_question_count,
            menu_context=body.menu_context,
            max_questions=max_questions,
        )
    except AuthoringValidationError as exc:
        logger.info("authoring_generation_rejected", error_code=exc.code, bank_id=body.bank_id)
        raise _unprocessable(exc) from exc
    return ValidationResponse(valid=True, payload=params)
