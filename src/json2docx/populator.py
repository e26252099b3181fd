"""High-level template population orchestrator.

Ties together the document wrapper, the walker and the error report into a
single public API for filling a ``.docx`` template from JSON data.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from json2docx.config import DEFAULT_OPTIONS, PopulateOptions
from json2docx.data import DataSource, load_data
from json2docx.document import DocumentHandle, DocumentSource
from json2docx.errors import ErrorCollector, render_error_report
from json2docx.walker import TemplateWalker

logger = logging.getLogger(__name__)


def populate_document(
    handle: DocumentHandle,
    data: Any,
    options: Optional[PopulateOptions] = None,
) -> ErrorCollector:
    """Populate the opened document *handle* in place.

    Raises:
        InvalidDocumentError: the document has no body.
    """
    options = options or DEFAULT_OPTIONS
    body = handle.main_content_root()

    walker = TemplateWalker(handle, options)
    errors = walker.populate(body, data)

    render_error_report(body, errors.records, options)

    if errors:
        logger.info("Template populated with %d error(s)", len(errors))
    else:
        logger.info("Template populated")
    return errors


@dataclass
class PopulationResult:
    """Filled document bytes and the errors met while producing them."""

    document: bytes
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


class TemplatePopulator:
    """Fill Word templates with JSON data.

    Usage::

        populator = TemplatePopulator(PopulateOptions(show_errors_in_document=True))
        result = populator.populate(Path("offer.docx"), {"client": "ACME"})
        Path("out.docx").write_bytes(result.document)

        # or file to file
        populator.populate_file("offer.docx", Path("data.json"), "out.docx")
    """

    def __init__(self, options: Optional[PopulateOptions] = None) -> None:
        self.options = options or DEFAULT_OPTIONS

    def populate(self, template: DocumentSource, data: DataSource) -> PopulationResult:
        """Populate *template* with *data*.

        Args:
            template: ``.docx`` bytes, a path or a binary stream.
            data: A dict, JSON text / bytes or a path to a JSON file.

        Returns:
            The filled document and the error messages.

        Raises:
            InvalidDocumentError: *template* is not a usable Word document.
            DataError: *data* is not a JSON object.
        """
        payload = load_data(data)
        handle = DocumentHandle.open(template)
        errors = populate_document(handle, payload, self.options)
        return PopulationResult(document=handle.save(), errors=errors.messages)

    def populate_file(
        self,
        template_path: str | Path,
        data: DataSource,
        output_path: str | Path,
    ) -> PopulationResult:
        """Populate the template file and write the result to *output_path*."""
        output_path = Path(output_path)

        result = self.populate(Path(template_path), data)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(result.document)
        return result
