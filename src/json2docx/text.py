"""Writing a value into a plain-text content control."""

from __future__ import annotations

import re

from lxml import etree

from json2docx.controls import ContentControl
from json2docx.errors import NodeResult
from json2docx.ooxml import (
    PLACEHOLDER_STYLE,
    W_BR,
    W_CR,
    W_P,
    W_R,
    W_R_STYLE,
    W_SHOWING_PLACEHOLDER,
    W_T,
    W_VAL,
    XML_SPACE,
    detach,
    make_element,
    make_run,
    make_text,
)

_LINE_BREAK_RE = re.compile(r"\r\n|\n\r|\r")


def split_lines(value: str) -> list[str]:
    """Split *value* on any line-break convention."""
    return _LINE_BREAK_RE.sub("\n", value).split("\n")


def fill_plain_text(
    control: ContentControl,
    value: str,
    *,
    replace_line_breaks: bool = False,
) -> NodeResult:
    """Replace the text of *control* with *value*.

    The content area is collapsed to a single run holding a single ``w:t``
    (or, with *replace_line_breaks*, ``w:t`` segments separated by ``w:br``).
    """
    tag = control.label
    content = control.content
    if content is None:
        return NodeResult.failure(f"Placeholder '{tag}' doesn't have any content area")

    paragraphs = list(content.iter(W_P))
    if len(paragraphs) > 1:
        return NodeResult.failure(f"Placeholder '{tag}' has more than one paragraph")
    paragraph = paragraphs[0] if paragraphs else None

    runs = list(content.iter(W_R))
    first_run = runs[0] if runs else None
    for run in runs[1:]:
        detach(run)

    segments = split_lines(value) if replace_line_breaks else [value]

    if first_run is None:
        if paragraph is None:
            return NodeResult.failure(
                f"Placeholder '{tag}' does not have a correct structure"
            )
        first_run = make_run()
        paragraph.append(first_run)

    texts = first_run.findall(W_T)
    for extra in texts[1:] + first_run.findall(W_BR) + first_run.findall(W_CR):
        first_run.remove(extra)

    if texts:
        first_text = texts[0]
        first_text.text = segments[0]
        first_text.set(XML_SPACE, "preserve")
    else:
        first_text = make_text(segments[0])
        first_run.append(first_text)

    anchor = first_text
    for segment in segments[1:]:
        br = make_element("w:br")
        anchor.addnext(br)
        anchor = make_text(segment)
        br.addnext(anchor)

    _clear_placeholder_style(content)
    properties = control.properties
    if properties is not None:
        for marker in properties.findall(W_SHOWING_PLACEHOLDER):
            properties.remove(marker)
    return NodeResult.success()


def _clear_placeholder_style(content: etree._Element) -> None:
    for style in list(content.iter(W_R_STYLE)):
        if style.get(W_VAL) == PLACEHOLDER_STYLE:
            detach(style)
