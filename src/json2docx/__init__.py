"""
json2docx - Fill Word (.docx) templates with JSON data

Content controls in the template are bound to values by their tag: plain
text, rich text (HTML) and repeating sections are supported, and a
``visible:`` tag shows or hides part of the document.
"""

__version__ = "0.1.0"

from .config import DEFAULT_OPTIONS, PopulateOptions
from .document import DocumentHandle, can_process_document
from .errors import ErrorCollector, ErrorRecord
from .exceptions import DataError, DataLookupError, InvalidDocumentError, Json2DocxError
from .populator import PopulationResult, TemplatePopulator, populate_document
from .walker import TemplateWalker

__all__ = [
    "PopulateOptions",
    "DEFAULT_OPTIONS",
    "DocumentHandle",
    "can_process_document",
    "ErrorCollector",
    "ErrorRecord",
    "Json2DocxError",
    "InvalidDocumentError",
    "DataError",
    "DataLookupError",
    "PopulationResult",
    "TemplatePopulator",
    "populate_document",
    "TemplateWalker",
]
