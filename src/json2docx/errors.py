"""Per-node error records and the optional in-document error report."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from docx.shared import RGBColor
from docx.text.run import Run
from lxml import etree

from json2docx.config import DEFAULT_OPTIONS, PopulateOptions
from json2docx.ooxml import W_BOOKMARK_START, W_ID, W_R, make_element, make_run, make_text

BOOKMARK_PREFIX = "_json2docx_error_"


@dataclass(frozen=True)
class ErrorRecord:
    message: str
    # The content control the error is about.
    element: Optional[etree._Element] = None


@dataclass(frozen=True)
class NodeResult:
    """Outcome of filling one content control."""

    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls) -> NodeResult:
        return cls()

    @classmethod
    def failure(cls, message: str) -> NodeResult:
        return cls(message)


@dataclass
class ErrorCollector:
    """Ordered, append-only list of the errors met during one population."""

    records: list[ErrorRecord] = field(default_factory=list)

    def add(self, message: str, element: Optional[etree._Element] = None) -> None:
        self.records.append(ErrorRecord(message, element))

    @property
    def messages(self) -> list[str]:
        return [record.message for record in self.records]

    def __iter__(self) -> Iterator[ErrorRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)


# ---------------------------------------------------------------------------
# In-document report
# ---------------------------------------------------------------------------

def render_error_report(
    body: etree._Element,
    records: list[ErrorRecord],
    options: Optional[PopulateOptions] = None,
) -> None:
    """Prepend a list of *records* to *body*, linking each to its control.

    Does nothing unless ``options.show_errors_in_document`` is set and there
    is at least one record.
    """
    options = options or DEFAULT_OPTIONS
    if not options.show_errors_in_document or not records:
        return

    color = RGBColor.from_string(options.error_color)
    next_id = _max_bookmark_id(body) + 1

    paragraphs = [_heading(options.error_heading)]
    for number, record in enumerate(records, start=1):
        text = f"{number}. {record.message}"
        element = record.element
        if element is None or not _is_attached(element, body):
            paragraphs.append(_paragraph(make_run(make_text(text))))
            continue

        name = f"{BOOKMARK_PREFIX}{number}"
        element.addprevious(make_element("w:bookmarkStart", id=next_id, name=name))
        element.addnext(make_element("w:bookmarkEnd", id=next_id))
        next_id += 1
        _highlight(element, color)

        link = make_element("w:hyperlink", anchor=name, history=1)
        link.append(make_run(make_text(text)))
        paragraphs.append(_paragraph(link))

    for paragraph in reversed(paragraphs):
        body.insert(0, paragraph)


def _heading(text: str) -> etree._Element:
    run = make_run(make_text(text))
    Run(run, None).bold = True
    return _paragraph(run)


def _paragraph(child: etree._Element) -> etree._Element:
    paragraph = make_element("w:p")
    paragraph.append(child)
    return paragraph


def _highlight(element: etree._Element, color: RGBColor) -> None:
    for r in element.iter(W_R):
        run = Run(r, None)
        run.font.bold = True
        run.font.color.rgb = color


def _max_bookmark_id(body: etree._Element) -> int:
    ids = [
        int(v) for v in (b.get(W_ID, "") for b in body.iter(W_BOOKMARK_START))
        if v.isdigit()
    ]
    return max(ids, default=-1)


def _is_attached(element: etree._Element, body: etree._Element) -> bool:
    return any(ancestor is body for ancestor in element.iterancestors())
