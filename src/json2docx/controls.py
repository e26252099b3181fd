"""Content-control model and classification.

A content control is a ``w:sdt`` element. :func:`read_control` inspects its
``w:sdtPr`` once and produces a :class:`ContentControl` whose
:class:`ControlKind` drives the rest of the processing; nothing downstream
re-derives the kind from the XML.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from lxml import etree

from json2docx.ooxml import (
    W,
    W14,
    W15,
    W15_REPEATING_SECTION,
    W_SDT,
    W_SDT_CONTENT,
    W_SDT_PR,
    W_TAG,
    W_TEXT,
    W_VAL,
    prefixed_name,
)

CONDITION_PREFIX = "visible:"

# Controls that are never a binding target.
UNSUPPORTED_TYPES = frozenset({
    f"{W}dataBinding",
    f"{W15}dataBinding",
    f"{W}equation",
    f"{W}picture",
    f"{W}citation",
    f"{W}group",
    f"{W}bibliography",
    f"{W14}entityPicker",
    f"{W15}repeatingSectionItem",
    f"{W15}webExtensionLinked",
    f"{W15}webExtensionCreated",
    f"{W}comboBox",
    f"{W}date",
    f"{W}docPartObj",
    f"{W}docPartList",
    f"{W}dropDownList",
    f"{W14}checkbox",
    f"{W15}appearance",
})


class ControlKind(Enum):
    PLAIN_TEXT = "plain_text"
    RICH_TEXT = "rich_text"
    REPEATING_SECTION = "repeating_section"
    UNSUPPORTED = "unsupported"


@dataclass
class ContentControl:
    element: etree._Element
    tag: Optional[str]
    kind: ControlKind
    # Why the control is UNSUPPORTED; empty otherwise.
    reason: str = ""

    @property
    def properties(self) -> Optional[etree._Element]:
        return self.element.find(W_SDT_PR)

    @property
    def content(self) -> Optional[etree._Element]:
        return self.element.find(W_SDT_CONTENT)

    @property
    def label(self) -> str:
        return self.tag or ""

    @property
    def is_conditional(self) -> bool:
        return bool(self.tag) and self.tag.lower().startswith(CONDITION_PREFIX)

    @property
    def condition(self) -> str:
        """The expression after ``visible:``, trimmed."""
        if not self.is_conditional:
            return ""
        return self.tag[len(CONDITION_PREFIX):].strip()


def read_control(element: etree._Element) -> ContentControl:
    """Classify the ``w:sdt`` *element*."""
    properties = element.find(W_SDT_PR)
    tag_el = properties.find(f".//{W_TAG}") if properties is not None else None
    if tag_el is None:
        return ContentControl(
            element, None, ControlKind.UNSUPPORTED,
            "Placeholder found without tag. "
            "Placeholders without tag are not supported",
        )

    tag = tag_el.get(W_VAL)
    if tag is None or not tag.strip():
        return ContentControl(
            element, tag, ControlKind.UNSUPPORTED,
            "Placeholder found with an empty tag. "
            "Placeholders without tag are not supported",
        )

    offending = [
        prefixed_name(d) for d in properties.iter()
        if d.tag in UNSUPPORTED_TYPES
    ]
    if offending:
        return ContentControl(
            element, tag, ControlKind.UNSUPPORTED,
            f"Placeholder '{tag}' has incorrect type '{', '.join(offending)}'. "
            "Only plain text, rich text and repeating section are supported",
        )

    if properties.find(f".//{W_TEXT}") is not None:
        kind = ControlKind.PLAIN_TEXT
    elif properties.find(f".//{W15_REPEATING_SECTION}") is not None:
        kind = ControlKind.REPEATING_SECTION
    else:
        # Word does not always mark rich text controls explicitly.
        kind = ControlKind.RICH_TEXT
    return ContentControl(element, tag, kind)


def child_controls(element: etree._Element) -> list[etree._Element]:
    """Return the first-level ``w:sdt`` descendants of *element*.

    A control is first-level when no other control lies between it and
    *element*; deeper ones belong to the control that encloses them.
    """
    found: list[etree._Element] = []
    for child in element:
        if child.tag == W_SDT:
            found.append(child)
        else:
            found.extend(child_controls(child))
    return found
