"""Convert an HTML fragment into paragraphs and list items.

Only the structure survives: ``p``, ``li`` and ``br`` start a new paragraph,
``ul`` / ``ol`` open (or nest) a numbered list. Inline formatting and every
other tag are dropped, their text kept.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from lxml import etree

from json2docx.html_tokens import CloseTag, OpenTag, Text, tokenize
from json2docx.numbering import (
    AbstractList,
    ListInstance,
    NumberFormat,
    NumberingAllocator,
)
from json2docx.ooxml import make_element, make_run, make_text

logger = logging.getLogger(__name__)

PARAGRAPH_TAGS = ("p", "li", "br", "br/")
LIST_FORMATS = {"ul": NumberFormat.BULLET, "ol": NumberFormat.DECIMAL}


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ContentBlock:
    text: str
    numbering_id: Optional[int] = None
    level: int = 0

    @property
    def is_list_item(self) -> bool:
        return self.numbering_id is not None


@dataclass
class ConversionResult:
    blocks: list[ContentBlock] = field(default_factory=list)
    abstract_lists: list[AbstractList] = field(default_factory=list)
    instances: list[ListInstance] = field(default_factory=list)


@dataclass
class _ActiveList:
    instance: ListInstance
    level: int = 0


# ---------------------------------------------------------------------------
# Converter
# ---------------------------------------------------------------------------

class HtmlConverter:
    """Turn HTML into :class:`ContentBlock` values.

    Usage::

        allocator = NumberingAllocator.from_numbering(numbering_root)
        result = HtmlConverter().convert("<ul><li>one</li></ul>", allocator)
    """

    def convert(self, html: str, allocator: NumberingAllocator) -> ConversionResult:
        """Convert *html*, allocating list definitions from *allocator*.

        The result carries only the definitions allocated by this call.
        """
        first_abstract = len(allocator.abstract_lists)
        first_instance = len(allocator.instances)

        blocks: list[ContentBlock] = []
        buffer: list[str] = []
        active: Optional[_ActiveList] = None

        def flush() -> None:
            text = "".join(buffer).strip()
            buffer.clear()
            if not text:
                return
            if active is not None:
                blocks.append(ContentBlock(text, active.instance.instance_id, active.level))
            else:
                blocks.append(ContentBlock(text))

        for token in tokenize(html):
            if isinstance(token, Text):
                if token.is_whitespace:
                    if not buffer or not buffer[-1].endswith(" "):
                        buffer.append(" ")
                else:
                    buffer.append(token.value)

            elif isinstance(token, OpenTag):
                if token.is_any_of(*PARAGRAPH_TAGS):
                    flush()
                number_format = LIST_FORMATS.get(token.name)
                if number_format is not None:
                    flush()
                    if active is None:
                        active = _ActiveList(allocator.allocate(number_format))
                    else:
                        active.level += 1

            elif isinstance(token, CloseTag):
                if active is not None and token.is_any_of(*LIST_FORMATS):
                    flush()
                    active.level -= 1
                    if active.level < 0:
                        active = None

        flush()

        logger.debug("Converted HTML into %d block(s)", len(blocks))
        return ConversionResult(
            blocks=blocks,
            abstract_lists=allocator.abstract_lists[first_abstract:],
            instances=allocator.instances[first_instance:],
        )


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def render_paragraph(block: ContentBlock) -> etree._Element:
    paragraph = make_element("w:p")
    if block.is_list_item:
        p_pr = make_element("w:pPr")
        num_pr = make_element("w:numPr")
        num_pr.append(make_element("w:ilvl", val=block.level))
        num_pr.append(make_element("w:numId", val=block.numbering_id))
        p_pr.append(num_pr)
        paragraph.append(p_pr)
    paragraph.append(make_run(make_text(block.text)))
    return paragraph


def render_paragraphs(blocks: list[ContentBlock]) -> list[etree._Element]:
    return [render_paragraph(block) for block in blocks]


def render_runs(blocks: list[ContentBlock]) -> list[etree._Element]:
    """Render *blocks* as runs for a control that sits inside a paragraph.

    Paragraph boundaries become line breaks; list numbering is dropped.
    """
    runs: list[etree._Element] = []
    for index, block in enumerate(blocks):
        if index:
            runs.append(make_run(make_element("w:br")))
        runs.append(make_run(make_text(block.text)))
    return runs
