from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field, replace

import structlog

from app.authoring.constants import CATEGORY_PATH_SEPARATOR
from app.authoring.types import CategoryTreeNode

logger = structlog.get_logger(__name__)


def _iter_nodes(roots: Sequence[CategoryTreeNode]) -> Iterator[CategoryTreeNode]:
    stack = list(reversed(roots))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def flatten_full_names(roots: Sequence[CategoryTreeNode]) -> tuple[str, ...]:
    return tuple(node.full_name for node in _iter_nodes(roots))


def find_node(roots: Sequence[CategoryTreeNode], full_name: str) -> CategoryTreeNode | None:
    for node in _iter_nodes(roots):
        if node.full_name == full_name:
            return node
    return None


def collect_descendants(node: CategoryTreeNode) -> tuple[str, ...]:
    """Full names strictly below ``node``, depth first."""
    return flatten_full_names(node.children)


def build_category_tree(
    records: Sequence[Mapping[str, object]],
    *,
    separator: str = CATEGORY_PATH_SEPARATOR,
    parent_path: str = "",
) -> tuple[CategoryTreeNode, ...]:
    nodes: list[CategoryTreeNode] = []
    for record in records:
        if not isinstance(record, Mapping):
            continue
        name = str(record.get("name") or "").strip()
        if not name:
            continue
        full_name = f"{parent_path}{separator}{name}" if parent_path else name
        raw_children = record.get("subCategories") or record.get("children") or ()
        if isinstance(raw_children, str) or not isinstance(raw_children, Sequence):
            raw_children = ()
        children = build_category_tree(
            raw_children,
            separator=separator,
            parent_path=full_name,
        )
        nodes.append(CategoryTreeNode(name=name, full_name=full_name, children=children))
    return tuple(nodes)


def nodes_from_names(names: Sequence[str]) -> tuple[CategoryTreeNode, ...]:
    seen: set[str] = set()
    nodes: list[CategoryTreeNode] = []
    for raw_name in names:
        name = raw_name.strip()
        if not name or name in seen:
            continue
        seen.add(name)
        nodes.append(CategoryTreeNode(name=name, full_name=name))
    return tuple(nodes)


@dataclass(frozen=True, slots=True)
class CategorySelection:
    roots: tuple[CategoryTreeNode, ...]
    selected: frozenset[str] = field(default_factory=frozenset)

    @property
    def all_names(self) -> tuple[str, ...]:
        return flatten_full_names(self.roots)

    @property
    def all_selected(self) -> bool:
        names = self.all_names
        return bool(names) and self.selected.issuperset(names)

    def is_selected(self, full_name: str) -> bool:
        return full_name in self.selected

    def selected_names(self) -> list[str]:
        return [name for name in self.all_names if name in self.selected]

    def toggle(self, full_name: str) -> CategorySelection:
        node = find_node(self.roots, full_name)
        if node is None:
            logger.debug("category_toggle_unknown_node", full_name=full_name)
            return self
        subtree = {full_name, *collect_descendants(node)}
        if full_name in self.selected:
            return replace(self, selected=self.selected - subtree)
        return replace(self, selected=self.selected | subtree)

    def select_all(self) -> CategorySelection:
        return replace(self, selected=frozenset(self.all_names))

    def deselect_all(self) -> CategorySelection:
        return replace(self, selected=frozenset())

    def toggle_all(self) -> CategorySelection:
        return self.deselect_all() if self.all_selected else self.select_all()


def is_beverage_category(name: str, keywords: Sequence[str]) -> bool:
    lowered = name.lower()
    return any(keyword.lower() in lowered for keyword in keywords if keyword)


def split_menu_categories(
    category_names: Sequence[str],
    keywords: Sequence[str],
) -> tuple[list[str], list[str]]:
    """Splits unique menu item categories into (non-beverage, beverage), keeping first-seen order."""
    items: list[str] = []
    beverages: list[str] = []
    seen: set[str] = set()
    for raw_name in category_names:
        name = (raw_name or "").strip()
        if not name or name in seen:
            continue
        seen.add(name)
        if is_beverage_category(name, keywords):
            beverages.append(name)
        else:
            items.append(name)
    return items, beverages


@dataclass(frozen=True, slots=True)
class MenuCategorySelector:
    """Item and beverage category selections for a menu-sourced bank; the two never affect each other."""

    items: CategorySelection
    beverages: CategorySelection
    include_beverages: bool = False

    @classmethod
    def from_menu_categories(
        cls,
        category_names: Sequence[str],
        keywords: Sequence[str],
    ) -> MenuCategorySelector:
        item_names, beverage_names = split_menu_categories(category_names, keywords)
        return cls(
            items=CategorySelection(roots=nodes_from_names(item_names)),
            beverages=CategorySelection(roots=nodes_from_names(beverage_names)),
        )

    @property
    def has_beverages(self) -> bool:
        return bool(self.beverages.roots)

    def toggle_item(self, name: str) -> MenuCategorySelector:
        return replace(self, items=self.items.toggle(name))

    def toggle_beverage(self, name: str) -> MenuCategorySelector:
        return replace(self, beverages=self.beverages.toggle(name))

    def toggle_all_items(self) -> MenuCategorySelector:
        return replace(self, items=self.items.toggle_all())

    def toggle_all_beverages(self) -> MenuCategorySelector:
        return replace(self, beverages=self.beverages.toggle_all())

    def set_include_beverages(self, include: bool) -> MenuCategorySelector:
        return replace(self, include_beverages=include)

    def beverage_categories_to_include(self) -> list[str]:
        if not self.include_beverages:
            return []
        return self.beverages.selected_names()
