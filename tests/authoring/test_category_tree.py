from __future__ import annotations

from app.authoring.category_tree import (
    CategorySelection,
    MenuCategorySelector,
    build_category_tree,
    collect_descendants,
    find_node,
    flatten_full_names,
    is_beverage_category,
    split_menu_categories,
)
from app.authoring.constants import DEFAULT_BEVERAGE_CATEGORY_KEYWORDS

SOP_TREE = [
    {
        "name": "Opening",
        "subCategories": [
            {"name": "Kitchen", "subCategories": [{"name": "Fryers"}]},
            {"name": "Bar"},
        ],
    },
    {"name": "Closing"},
]


def _selection() -> CategorySelection:
    return CategorySelection(roots=build_category_tree(SOP_TREE))


def test_build_tree_assigns_full_paths() -> None:
    roots = build_category_tree(SOP_TREE)

    assert flatten_full_names(roots) == (
        "Opening",
        "Opening > Kitchen",
        "Opening > Kitchen > Fryers",
        "Opening > Bar",
        "Closing",
    )


def test_build_tree_skips_nameless_and_malformed_records() -> None:
    roots = build_category_tree(
        [
            {"name": "  "},
            "not a record",  # type: ignore[list-item]
            {"name": "Hygiene", "children": [{"name": "Hands"}]},
            {"name": "Uniform", "subCategories": "broken"},
        ]
    )

    assert flatten_full_names(roots) == ("Hygiene", "Hygiene > Hands", "Uniform")


def test_collect_descendants_is_depth_first() -> None:
    node = find_node(build_category_tree(SOP_TREE), "Opening")

    assert node is not None
    assert collect_descendants(node) == ("Opening > Kitchen", "Opening > Kitchen > Fryers", "Opening > Bar")


def test_toggle_parent_cascades_to_whole_subtree() -> None:
    selection = _selection().toggle("Opening")

    assert selection.selected_names() == [
        "Opening",
        "Opening > Kitchen",
        "Opening > Kitchen > Fryers",
        "Opening > Bar",
    ]

    selection = selection.toggle("Opening")
    assert selection.selected_names() == []


def test_toggle_child_leaves_parent_unchanged() -> None:
    selection = _selection().toggle("Opening > Kitchen")

    assert selection.is_selected("Opening") is False
    assert selection.selected_names() == ["Opening > Kitchen", "Opening > Kitchen > Fryers"]


def test_deselect_child_keeps_parent_selected() -> None:
    selection = _selection().toggle("Opening").toggle("Opening > Bar")

    assert selection.is_selected("Opening") is True
    assert selection.is_selected("Opening > Bar") is False
    assert selection.all_selected is False


def test_toggle_unknown_name_is_noop() -> None:
    selection = _selection()
    assert selection.toggle("Missing") is selection


def test_all_selected_is_derived_from_selection() -> None:
    selection = _selection().toggle("Opening")
    assert selection.all_selected is False

    selection = selection.toggle("Closing")
    assert selection.all_selected is True


def test_toggle_all_selects_then_clears() -> None:
    selection = _selection().toggle("Closing").toggle_all()
    assert selection.all_selected is True
    assert len(selection.selected) == 5

    selection = selection.toggle_all()
    assert selection.selected == frozenset()


def test_empty_tree_is_never_all_selected() -> None:
    selection = CategorySelection(roots=())
    assert selection.all_selected is False
    assert selection.toggle_all().selected == frozenset()


def test_beverage_keywords_match_case_insensitive_substrings() -> None:
    assert is_beverage_category("Hot Drinks", DEFAULT_BEVERAGE_CATEGORY_KEYWORDS) is True
    assert is_beverage_category("COFFEE & TEA", DEFAULT_BEVERAGE_CATEGORY_KEYWORDS) is True
    assert is_beverage_category("Starters", DEFAULT_BEVERAGE_CATEGORY_KEYWORDS) is False


def test_split_menu_categories_dedupes_and_keeps_order() -> None:
    items, beverages = split_menu_categories(
        ["Starters", "Cocktails", "Mains", "Starters", " ", "Soft Drinks", "Desserts"],
        DEFAULT_BEVERAGE_CATEGORY_KEYWORDS,
    )

    assert items == ["Starters", "Mains", "Desserts"]
    assert beverages == ["Cocktails", "Soft Drinks"]


def test_menu_selector_groups_are_independent() -> None:
    selector = MenuCategorySelector.from_menu_categories(
        ["Starters", "Mains", "Cocktails", "Beer"],
        DEFAULT_BEVERAGE_CATEGORY_KEYWORDS,
    )
    assert selector.has_beverages is True

    selector = selector.toggle_all_items().toggle_beverage("Beer")

    assert selector.items.all_selected is True
    assert selector.beverages.selected_names() == ["Beer"]

    selector = selector.toggle_all_items()
    assert selector.items.selected_names() == []
    assert selector.beverages.selected_names() == ["Beer"]


def test_menu_selector_only_reports_beverages_when_included() -> None:
    selector = MenuCategorySelector.from_menu_categories(["Mains", "Wine List"], DEFAULT_BEVERAGE_CATEGORY_KEYWORDS)
    selector = selector.toggle_item("Mains").toggle_all_beverages()

    assert selector.beverage_categories_to_include() == []

    selector = selector.set_include_beverages(True)
    assert selector.beverage_categories_to_include() == ["Wine List"]


def test_menu_selector_without_beverages() -> None:
    selector = MenuCategorySelector.from_menu_categories(["Mains"], DEFAULT_BEVERAGE_CATEGORY_KEYWORDS)
    assert selector.has_beverages is False
    assert selector.toggle_beverage("Mains") == selector


def test_deselecting_one_child_clears_all_selected() -> None:
    tree = [{"name": "A", "subCategories": [{"name": "1"}, {"name": "2"}]}]
    selection = CategorySelection(roots=build_category_tree(tree))

    selection = selection.toggle("A")
    assert selection.selected == frozenset({"A", "A > 1", "A > 2"})
    assert selection.all_selected is True

    selection = selection.toggle("A > 1")
    assert selection.selected == frozenset({"A", "A > 2"})
    assert selection.all_selected is False


def test_toggle_twice_restores_subtree() -> None:
    start = _selection().toggle("Opening > Kitchen").toggle("Closing")

    for name in ("Opening > Kitchen", "Opening > Kitchen > Fryers", "Opening > Bar", "Closing"):
        node = find_node(start.roots, name)
        assert node is not None
        subtree = {name, *collect_descendants(node)}

        restored = start.toggle(name).toggle(name)

        assert restored.selected & subtree == start.selected & subtree
