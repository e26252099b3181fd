"""Thin wrapper over a python-docx document.

Only the parts population needs are exposed: the body element, the
numbering definitions and serialisation.
"""

from __future__ import annotations

import io
import logging
import zipfile
from pathlib import Path
from typing import IO, Optional, Union

import docx
from docx.document import Document as DocxDocument
from docx.opc.constants import CONTENT_TYPE as CT
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.opc.exceptions import PackageNotFoundError
from docx.oxml import parse_xml
from docx.oxml.ns import nsdecls
from docx.parts.numbering import NumberingPart
from lxml import etree

from json2docx.exceptions import InvalidDocumentError

logger = logging.getLogger(__name__)

DocumentSource = Union[bytes, str, Path, IO[bytes]]

_OPEN_ERRORS = (PackageNotFoundError, zipfile.BadZipFile, ValueError, KeyError, OSError)


class DocumentHandle:
    """An opened, mutable ``.docx`` package."""

    def __init__(self, document: DocxDocument) -> None:
        self.document = document

    @classmethod
    def open(cls, source: DocumentSource) -> DocumentHandle:
        """Open *source* (bytes, a path or a binary stream).

        Raises:
            InvalidDocumentError: *source* is not a readable Word document.
        """
        if isinstance(source, bytes):
            source = io.BytesIO(source)
        elif isinstance(source, Path):
            source = str(source)

        try:
            document = docx.Document(source)
        except _OPEN_ERRORS as exc:
            raise InvalidDocumentError(f"cannot open Word document: {exc}") from exc
        return cls(document)

    # -- parts --------------------------------------------------------------

    def main_content_root(self) -> etree._Element:
        """Return the ``w:body`` element.

        Raises:
            InvalidDocumentError: the document has no body.
        """
        body = self.document.element.body
        if body is None:
            raise InvalidDocumentError(
                "Invalid document format. The document is lacking its main part."
            )
        return body

    def existing_numbering_root(self) -> Optional[etree._Element]:
        """Return the ``w:numbering`` element, or ``None`` if there is none."""
        try:
            part = self.document.part.part_related_by(RT.NUMBERING)
        except KeyError:
            return None
        return part.element

    def numbering_root(self) -> etree._Element:
        """Return the ``w:numbering`` element, adding an empty part if needed."""
        root = self.existing_numbering_root()
        if root is not None:
            return root

        document_part = self.document.part
        package = document_part.package
        part = NumberingPart(
            package.next_partname("/word/numbering%d.xml"),
            CT.WML_NUMBERING,
            parse_xml(f"<w:numbering {nsdecls('w')}/>"),
            package,
        )
        document_part.relate_to(part, RT.NUMBERING)
        logger.debug("Added numbering part %s", part.partname)
        return part.element

    # -- output -------------------------------------------------------------

    def save(self, target: Union[str, Path, IO[bytes], None] = None) -> Optional[bytes]:
        """Serialise the document.

        Returns the ``.docx`` bytes when *target* is ``None``; otherwise
        writes to the path or stream and returns ``None``.
        """
        if target is None:
            buffer = io.BytesIO()
            self.document.save(buffer)
            return buffer.getvalue()
        if isinstance(target, Path):
            target = str(target)
        self.document.save(target)
        return None


def can_process_document(source: DocumentSource) -> bool:
    """Return ``True`` if *source* opens as a Word document with a body."""
    try:
        DocumentHandle.open(source).main_content_root()
    except InvalidDocumentError:
        return False
    return True
