"""Build validated navigation trees from declarative sidebar items.

A sidebar is declared as an ordered list where each entry is either a document
reference or a category grouping further entries. The accepted shapes mirror
the sidebar files consumed by the static-site generator:

- ``"getting-started/installation"``: shorthand for a document reference;
- ``{"type": "doc", "id": "intro"}``: explicit document reference;
- ``{"type": "category", "label": "Guide", "collapsed": False, "items": [...]}``;
- ``{"category": "Guide", "items": [...]}``: category shorthand.

Examples
--------
>>> tree = build_sidebar(
...     "tutorialSidebar",
...     ["intro", {"category": "Getting Started", "items": ["install"]}],
... )
>>> list(tree.doc_ids())
['intro', 'install']
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import typing as typ

from .models import ValidationError, ValidationKind

logger = logging.getLogger(__name__)

PATH_SEPARATOR = " > "


@dc.dataclass(frozen=True, slots=True)
class DocRef:
    """Leaf referencing a document by identifier."""

    id: str


@dc.dataclass(frozen=True, slots=True)
class Category:
    """Labelled group of sidebar items; never empty."""

    label: str
    items: tuple[SidebarItem, ...]
    collapsed: bool = True


SidebarItem: typ.TypeAlias = DocRef | Category


@dc.dataclass(frozen=True, slots=True)
class SidebarTree:
    """Named root sequence of sidebar items."""

    name: str
    items: tuple[SidebarItem, ...]

    def doc_ids(self) -> cabc.Iterator[str]:
        """Yield every leaf id depth-first, in declaration order."""
        yield from _walk_doc_ids(self.items)

    def first_doc(self) -> str | None:
        """Return the first document of the tree, or ``None`` when empty."""
        return next(self.doc_ids(), None)

    def categories(self) -> cabc.Iterator[Category]:
        """Yield every category depth-first, in declaration order."""
        pending: list[SidebarItem] = list(reversed(self.items))
        while pending:
            item = pending.pop()
            if isinstance(item, Category):
                yield item
                pending.extend(reversed(item.items))


def _walk_doc_ids(items: cabc.Iterable[SidebarItem]) -> cabc.Iterator[str]:
    for item in items:
        match item:
            case DocRef(id=doc_id):
                yield doc_id
            case Category(items=children):
                yield from _walk_doc_ids(children)


def build_sidebar(name: str, declarations: object) -> SidebarTree:
    """Validate sidebar declarations and return the resulting tree.

    Parameters
    ----------
    name : str
        Identifier of the sidebar (for example ``"tutorialSidebar"``); used in
        error messages and as the key navbar items refer to.
    declarations : object
        Ordered sequence of item declarations.

    Returns
    -------
    SidebarTree
        Tree whose sibling order matches the declaration order exactly.

    Raises
    ------
    ValidationError
        ``DuplicateDocId`` when a document id appears twice in the tree,
        ``EmptyCategory`` when a category declares no items, and
        ``MalformedItem`` when an entry matches none of the accepted shapes.
    """
    if not _is_sequence(declarations):
        msg = f"sidebar '{name}' must be a list of items"
        raise ValidationError(ValidationKind.MALFORMED_ITEM, msg)
    builder = _TreeBuilder(name)
    items = builder.build_items(typ.cast("cabc.Sequence[object]", declarations), ())
    logger.debug("built sidebar %s with %d documents", name, len(builder.seen))
    return SidebarTree(name=name, items=items)


def build_sidebars(
    declarations: cabc.Mapping[str, object],
) -> dict[str, SidebarTree]:
    """Build every named sidebar, validating each tree independently.

    Each tree is its own namespace: the same document id may appear in several
    trees, but only once within one tree.
    """
    return {
        str(name): build_sidebar(str(name), items)
        for name, items in declarations.items()
    }


class _TreeBuilder:
    """Recursive converter tracking ids already seen within one tree."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.seen: dict[str, str] = {}

    def build_items(
        self, declarations: cabc.Sequence[object], path: tuple[str, ...]
    ) -> tuple[SidebarItem, ...]:
        return tuple(
            self.build_item(entry, path, index)
            for index, entry in enumerate(declarations)
        )

    def build_item(
        self, entry: object, path: tuple[str, ...], index: int
    ) -> SidebarItem:
        match entry:
            case str() as doc_id:
                return self._doc(doc_id, path)
            case {"type": "doc", "id": str() as doc_id}:
                return self._doc(doc_id, path)
            case {"type": "category", **rest}:
                return self._category(rest.get("label"), rest, path)
            case {"category": label, **rest}:
                return self._category(label, rest, path)
            case _:
                location = self._describe(path) or "top level"
                msg = (
                    f"unrecognised item #{index + 1} at {location}: {entry!r}; "
                    "expected a document id or a category"
                )
                raise ValidationError(ValidationKind.MALFORMED_ITEM, msg)

    def _doc(self, doc_id: str, path: tuple[str, ...]) -> DocRef:
        doc_id = doc_id.strip()
        if not doc_id:
            msg = f"empty document id at {self._describe(path) or 'top level'}"
            raise ValidationError(ValidationKind.MALFORMED_ITEM, msg)
        location = self._describe(path) or "top level"
        if doc_id in self.seen:
            msg = (
                f"document '{doc_id}' appears more than once in sidebar "
                f"'{self.name}' (at {self.seen[doc_id]} and {location})"
            )
            raise ValidationError(ValidationKind.DUPLICATE_DOC_ID, msg)
        self.seen[doc_id] = location
        return DocRef(id=doc_id)

    def _category(
        self,
        label: object,
        payload: cabc.Mapping[str, object],
        path: tuple[str, ...],
    ) -> Category:
        if not isinstance(label, str) or not label.strip():
            msg = f"category at {self._describe(path) or 'top level'} needs a label"
            raise ValidationError(ValidationKind.MALFORMED_ITEM, msg)
        child_path = (*path, label)
        children = payload.get("items")
        if children is None or (_is_sequence(children) and not children):
            msg = f"category {self._describe(child_path)} has no items"
            raise ValidationError(ValidationKind.EMPTY_CATEGORY, msg)
        if not _is_sequence(children):
            msg = f"category {self._describe(child_path)} items must be a list"
            raise ValidationError(ValidationKind.MALFORMED_ITEM, msg)
        collapsed = payload.get("collapsed", True)
        if not isinstance(collapsed, bool):
            msg = f"category {self._describe(child_path)} 'collapsed' must be a boolean"
            raise ValidationError(ValidationKind.MALFORMED_ITEM, msg)
        items = self.build_items(
            typ.cast("cabc.Sequence[object]", children), child_path
        )
        return Category(label=label, items=items, collapsed=collapsed)

    def _describe(self, path: tuple[str, ...]) -> str:
        if not path:
            return ""
        return PATH_SEPARATOR.join((self.name, *path))


def _is_sequence(value: object) -> bool:
    return isinstance(value, cabc.Sequence) and not isinstance(value, str | bytes)


__all__ = [
    "Category",
    "DocRef",
    "SidebarItem",
    "SidebarTree",
    "build_sidebar",
    "build_sidebars",
]
