from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from app.authoring.category_tree import CategorySelection, MenuCategorySelector
from app.authoring.constants import MAX_BANK_CATEGORIES
from app.authoring.errors import (
    CategoryLimitError,
    DuplicateCategoryError,
    EmptyBankNameError,
    EmptyCategoriesError,
    EmptyCategoryNameError,
    MissingBankSourceError,
)
from app.authoring.types import SourceType


@dataclass(frozen=True, slots=True)
class BankDraft:
    name: str
    source_type: SourceType
    description: str = ""
    source_menu_id: str | None = None
    source_sop_document_id: str | None = None
    categories: tuple[str, ...] = ()
    beverage_categories: tuple[str, ...] = ()

    @classmethod
    def for_menu(
        cls,
        *,
        name: str,
        menu_id: str | None,
        selector: MenuCategorySelector,
        description: str = "",
    ) -> BankDraft:
        return cls(
            name=name,
            description=description,
            source_type=SourceType.MENU,
            source_menu_id=menu_id,
            categories=tuple(selector.items.selected_names()),
            beverage_categories=tuple(selector.beverage_categories_to_include()),
        )

    @classmethod
    def for_sop(
        cls,
        *,
        name: str,
        document_id: str | None,
        selection: CategorySelection,
        description: str = "",
    ) -> BankDraft:
        return cls(
            name=name,
            description=description,
            source_type=SourceType.SOP,
            source_sop_document_id=document_id,
            categories=tuple(selection.selected_names()),
        )


def validate_bank_draft(draft: BankDraft) -> None:
    if not draft.name.strip():
        raise EmptyBankNameError()

    if draft.source_type is SourceType.MENU:
        if not draft.source_menu_id:
            raise MissingBankSourceError("Please select a menu for a menu-sourced bank.")
        if not draft.categories:
            raise EmptyCategoriesError("Please select at least one category for a menu-sourced bank.")
    elif draft.source_type is SourceType.SOP:
        if not draft.source_sop_document_id:
            raise MissingBankSourceError("Please select an SOP document for an SOP-sourced bank.")
        if not draft.categories:
            raise EmptyCategoriesError("Please select at least one category for an SOP-sourced bank.")


def build_bank_payload(draft: BankDraft) -> dict[str, object]:
    validate_bank_draft(draft)

    payload: dict[str, object] = {
        "name": draft.name.strip(),
        "sourceType": draft.source_type.value,
    }
    description = draft.description.strip()
    if description:
        payload["description"] = description

    if draft.source_type is SourceType.MENU:
        payload["sourceMenuId"] = draft.source_menu_id
        payload["categoriesToInclude"] = list(draft.categories)
        if draft.beverage_categories:
            payload["beverageCategoriesToInclude"] = list(draft.beverage_categories)
    elif draft.source_type is SourceType.SOP:
        payload["sourceSopDocumentId"] = draft.source_sop_document_id
        payload["categories"] = list(draft.categories)
        payload["generationMethod"] = "MANUAL"
    elif draft.categories:
        payload["categories"] = list(draft.categories)

    return payload


def add_bank_category(
    categories: Sequence[str],
    raw_name: str,
    *,
    limit: int = MAX_BANK_CATEGORIES,
) -> tuple[str, ...]:
    name = raw_name.strip()
    if not name:
        raise EmptyCategoryNameError()
    if name in categories:
        raise DuplicateCategoryError()
    if len(categories) >= limit:
        raise CategoryLimitError(f"Maximum of {limit} categories allowed.")
    return (*categories, name)


def remove_bank_category(categories: Sequence[str], name: str) -> tuple[str, ...]:
    return tuple(category for category in categories if category != name)
