"""Walk content controls and bind them to data.

The walk is depth-first in document order. Every control either gets
rewritten, gets removed (an invisible conditional) or leaves exactly one
:class:`~json2docx.errors.ErrorRecord`; a failing control never stops its
siblings from being processed.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Optional

from lxml import etree

from json2docx.conditions import evaluate
from json2docx.config import DEFAULT_OPTIONS, PopulateOptions
from json2docx.controls import ContentControl, ControlKind, child_controls, read_control
from json2docx.data import MISSING, resolve, stringify
from json2docx.document import DocumentHandle
from json2docx.errors import ErrorCollector, NodeResult
from json2docx.exceptions import DataLookupError
from json2docx.html_converter import HtmlConverter, render_paragraphs, render_runs
from json2docx.numbering import NumberingAllocator, merge_numbering
from json2docx.ooxml import (
    W_BODY,
    W_ID,
    W_P,
    W_SDT,
    W_SHOWING_PLACEHOLDER,
    W_TC,
    W_TC_PR,
    W_TEXT,
    W_TXBX_CONTENT,
    detach,
    make_element,
)
from json2docx.text import fill_plain_text

logger = logging.getLogger(__name__)

# Elements that hold paragraphs directly; a paragraph ancestor beyond one of
# these belongs to an enclosing run, e.g. a text box.
_BLOCK_CONTAINERS = frozenset({W_BODY, W_TC, W_TXBX_CONTENT})


class TemplateWalker:
    """Populate the content controls below an element.

    Usage::

        walker = TemplateWalker(handle, PopulateOptions(replace_line_breaks=True))
        errors = walker.populate(handle.main_content_root(), data)

    Without a *document*, list definitions produced by rich-text values are
    kept in :attr:`allocator` instead of being merged into a numbering part.
    """

    def __init__(
        self,
        document: Optional[DocumentHandle] = None,
        options: Optional[PopulateOptions] = None,
    ) -> None:
        self.document = document
        self.options = options or DEFAULT_OPTIONS
        self.allocator = NumberingAllocator()
        self.converter = HtmlConverter()

    # -- public API ---------------------------------------------------------

    def populate(
        self,
        root: etree._Element,
        data: Any,
        errors: Optional[ErrorCollector] = None,
    ) -> ErrorCollector:
        """Bind every first-level control below *root* against *data*."""
        if errors is None:
            errors = ErrorCollector()
        for element in child_controls(root):
            self.populate_control(element, data, errors)
        return errors

    def populate_control(
        self,
        element: etree._Element,
        scope: Any,
        errors: ErrorCollector,
    ) -> None:
        """Process the single ``w:sdt`` *element* with *scope* as binding scope."""
        control = read_control(element)
        if control.kind is ControlKind.UNSUPPORTED:
            self._record(errors, control, control.reason)
            return

        logger.debug("Processing tag: '%s'", control.tag)
        try:
            result = self._process(control, scope, errors)
        except Exception as exc:
            logger.exception("An error '%s' occurred while processing '%s'", exc, control.tag)
            errors.add(f"An error '{exc}' occurred while processing '{control.tag}'", element)
            return

        if not result.ok:
            self._record(errors, control, result.error)

    # -- dispatch -----------------------------------------------------------

    def _process(self, control: ContentControl, scope: Any, errors: ErrorCollector) -> NodeResult:
        if control.is_conditional:
            return self._handle_condition(control, scope, errors)

        try:
            value = resolve(scope, control.tag)
        except DataLookupError as exc:
            return NodeResult.failure(
                f"An error '{exc}' occurred while fetching data from '{control.tag}'"
            )
        if value is MISSING:
            return NodeResult.failure(f"No data matched placeholder '{control.tag}'")

        handler = getattr(self, f"_handle_{control.kind.value}")
        return handler(control, value, errors)

    def _record(self, errors: ErrorCollector, control: ContentControl, message: str) -> None:
        logger.warning("%s", message)
        errors.add(message, control.element)

    # -- handlers -----------------------------------------------------------

    def _handle_condition(
        self, control: ContentControl, scope: Any, errors: ErrorCollector
    ) -> NodeResult:
        if control.kind is ControlKind.REPEATING_SECTION:
            return NodeResult.failure(
                f"Conditional tag '{control.tag}' can be applied only on plain or "
                "rich text, but is applied on repeating section"
            )

        condition = control.condition
        visible, error = evaluate(condition, scope)
        if error is not None:
            self._record(
                errors, control,
                f"Failed to evaluate visibility condition '{condition}'. Error: '{error}'",
            )
            visible = True

        if visible:
            self.populate(control.element, scope, errors)
            return NodeResult.success()

        element = control.element
        parent = element.getparent()
        if parent is not None and parent.tag == W_TC:
            # A table cell must keep at least one paragraph.
            element.addnext(make_element("w:p"))
        detach(element)
        logger.debug("Removed hidden control '%s'", control.tag)
        return NodeResult.success()

    def _handle_repeating_section(
        self, control: ContentControl, value: Any, errors: ErrorCollector
    ) -> NodeResult:
        tag = control.tag
        if not isinstance(value, list):
            return NodeResult.failure(
                f"The value of '{tag}' parameter is not an array. "
                "Parameter mapped to a repeating section can only be an array"
            )

        content = control.content
        if content is None or len(content) == 0:
            return NodeResult.failure(
                f"Encountered repeating '{tag}' with no content area for "
                "repeating item. It will be skipped"
            )
        template = content[0]
        if template.tag != W_SDT:
            return NodeResult.failure(
                f"Encountered repeating '{tag}' with wrong element instead of "
                "repeating item. It will be skipped"
            )

        for child in list(content):
            content.remove(child)
        # Control ids must stay unique across the clones.
        for sdt_id in list(template.iter(W_ID)):
            detach(sdt_id)

        for item in value:
            if not isinstance(item, dict):
                self._record(
                    errors, control,
                    f"Element '{stringify(item)}' in '{tag}' is not an object. "
                    "It should be an object in '{}' braces",
                )
                continue
            clone = copy.deepcopy(template)
            content.append(clone)
            self.populate(clone, item, errors)

        logger.debug("Repeated '%s' %d time(s)", tag, len(value))
        return NodeResult.success()

    def _handle_plain_text(
        self, control: ContentControl, value: Any, errors: ErrorCollector
    ) -> NodeResult:
        logger.debug("%s: %r", control.tag, value)
        return fill_plain_text(
            control,
            stringify(value),
            replace_line_breaks=self.options.replace_line_breaks,
        )

    def _handle_rich_text(
        self, control: ContentControl, value: Any, errors: ErrorCollector
    ) -> NodeResult:
        tag = control.tag
        element = control.element
        if next(element.iter(W_TEXT), None) is not None:
            return NodeResult.failure(
                f"HTML '{tag}' cannot be written to PlainText control. "
                "Use Rich Text Control instead"
            )

        content = control.content
        if content is None:
            return NodeResult.failure(f"Placeholder '{tag}' doesn't have any content area")

        if self.document is not None:
            allocator = NumberingAllocator.from_numbering(
                self.document.existing_numbering_root()
            )
        else:
            allocator = self.allocator
        result = self.converter.convert(stringify(value), allocator)
        if self.document is not None and (result.abstract_lists or result.instances):
            merge_numbering(
                self.document.numbering_root(), result.abstract_lists, result.instances
            )

        if _inside_paragraph(element):
            target = content
            children = render_runs(result.blocks)
        else:
            cell = next(content.iter(W_TC), None)
            target = cell if cell is not None else content
            children = render_paragraphs(result.blocks)

        for child in list(target):
            if child.tag != W_TC_PR:
                target.remove(child)
        target.extend(children)
        if target.tag == W_TC and target.find(W_P) is None:
            target.append(make_element("w:p"))

        properties = control.properties
        if properties is not None:
            for marker in properties.findall(W_SHOWING_PLACEHOLDER):
                properties.remove(marker)
        return NodeResult.success()


def _inside_paragraph(element: etree._Element) -> bool:
    """True for a run-level control, including one nested in another inline control."""
    for ancestor in element.iterancestors():
        if ancestor.tag == W_P:
            return True
        if ancestor.tag in _BLOCK_CONTAINERS:
            return False
    return False
