"""Shared fixtures: an in-memory document and its body."""

from __future__ import annotations

import docx
import pytest

from json2docx.document import DocumentHandle


@pytest.fixture
def document():
    return docx.Document()


@pytest.fixture
def handle(document):
    return DocumentHandle(document)


@pytest.fixture
def body(handle):
    return handle.main_content_root()
