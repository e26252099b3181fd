"""List numbering definitions for generated content.

Word lists are declared in the numbering part: a ``w:abstractNum`` holds the
formatting of every level and a ``w:num`` instance points at it; list
paragraphs reference the instance by ``numId``.

:class:`NumberingAllocator` hands out ids for new definitions. It is a plain
value seeded from the numbering already present in a document, passed into a
conversion and read back afterwards, so generated ids never collide with
existing ones or with each other.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from lxml import etree

from json2docx.ooxml import (
    W_ABSTRACT_NUM,
    W_ABSTRACT_NUM_ID,
    W_NUM,
    W_NUM_ID,
    make_element,
)

LEVEL_COUNT = 9
BULLETS = ("•", "◦", "·")
INDENT_PER_LEVEL = 720
HANGING_INDENT = 360


class NumberFormat(Enum):
    BULLET = "bullet"
    DECIMAL = "decimal"


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AbstractList:
    """A nine-level list definition (``w:abstractNum``)."""

    abstract_id: int
    number_format: NumberFormat

    def level_text(self, level: int) -> str:
        if self.number_format is NumberFormat.BULLET:
            return BULLETS[level % len(BULLETS)]
        return f"%{level + 1}."

    def to_element(self) -> etree._Element:
        abstract = make_element("w:abstractNum", abstractNumId=self.abstract_id)
        for level in range(LEVEL_COUNT):
            lvl = make_element("w:lvl", ilvl=level)
            lvl.append(make_element("w:start", val=1))
            lvl.append(make_element("w:numFmt", val=self.number_format.value))
            lvl.append(make_element("w:lvlText", val=self.level_text(level)))
            p_pr = make_element("w:pPr")
            p_pr.append(make_element(
                "w:ind",
                left=INDENT_PER_LEVEL * (level + 1),
                hanging=HANGING_INDENT,
            ))
            lvl.append(p_pr)
            abstract.append(lvl)
        return abstract


@dataclass(frozen=True)
class ListInstance:
    """A concrete list (``w:num``) referenced from list paragraphs."""

    instance_id: int
    abstract_id: int

    def to_element(self) -> etree._Element:
        num = make_element("w:num", numId=self.instance_id)
        num.append(make_element("w:abstractNumId", val=self.abstract_id))
        return num


# ---------------------------------------------------------------------------
# Allocator
# ---------------------------------------------------------------------------

@dataclass
class NumberingAllocator:
    next_abstract_id: int = 0
    next_instance_id: int = 1
    abstract_lists: list[AbstractList] = field(default_factory=list)
    instances: list[ListInstance] = field(default_factory=list)

    @classmethod
    def from_numbering(cls, root: Optional[etree._Element]) -> NumberingAllocator:
        """Seed the counters above every id declared under *root*."""
        if root is None:
            return cls()
        max_abstract = _max_id(root.iter(W_ABSTRACT_NUM), W_ABSTRACT_NUM_ID, -1)
        max_instance = _max_id(root.iter(W_NUM), W_NUM_ID, 0)
        return cls(next_abstract_id=max_abstract + 1, next_instance_id=max_instance + 1)

    def allocate(self, number_format: NumberFormat) -> ListInstance:
        """Create a new list definition and an instance of it."""
        abstract = AbstractList(self.next_abstract_id, number_format)
        instance = ListInstance(self.next_instance_id, abstract.abstract_id)
        self.next_abstract_id += 1
        self.next_instance_id += 1
        self.abstract_lists.append(abstract)
        self.instances.append(instance)
        return instance


def _max_id(elements, attr: str, default: int) -> int:
    ids = [int(v) for v in (el.get(attr, "") for el in elements) if v.lstrip("-").isdigit()]
    return max(ids) if ids else default


# ---------------------------------------------------------------------------
# Merge into a document
# ---------------------------------------------------------------------------

def merge_numbering(
    root: etree._Element,
    abstract_lists: list[AbstractList],
    instances: list[ListInstance],
) -> None:
    """Insert new definitions into the ``w:numbering`` *root*.

    The schema requires every ``w:abstractNum`` to precede every ``w:num``;
    new elements are placed after the last existing one of their kind.
    """
    anchor = _last_child(root, W_ABSTRACT_NUM)
    for abstract in abstract_lists:
        element = abstract.to_element()
        if anchor is not None:
            anchor.addnext(element)
        else:
            first_num = root.find(W_NUM)
            if first_num is not None:
                first_num.addprevious(element)
            else:
                root.append(element)
        anchor = element

    anchor = _last_child(root, W_NUM)
    for instance in instances:
        element = instance.to_element()
        if anchor is not None:
            anchor.addnext(element)
        else:
            root.append(element)
        anchor = element


def _last_child(root: etree._Element, tag: str) -> Optional[etree._Element]:
    found = root.findall(tag)
    return found[-1] if found else None
