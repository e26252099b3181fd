"""Exception classes for json2docx."""

from __future__ import annotations


class Json2DocxError(Exception):
    """Base exception for all json2docx errors."""


class InvalidDocumentError(Json2DocxError):
    """The template cannot be opened as a Word document or lacks its main part."""


class DataError(Json2DocxError):
    """The input data is not a JSON object."""


class DataLookupError(Json2DocxError):
    """A tag could not be evaluated as a path expression against the data."""
