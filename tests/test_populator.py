"""Integration tests for the TemplatePopulator orchestrator."""

from __future__ import annotations

import io
import json
import zipfile

import pytest
from docx.oxml.ns import qn

from builders import body_of, build_docx, paragraph, plain, repeating, run, sdt, text_of
from json2docx.config import PopulateOptions
from json2docx.document import DocumentHandle
from json2docx.errors import BOOKMARK_PREFIX
from json2docx.exceptions import DataError, InvalidDocumentError
from json2docx.populator import PopulationResult, TemplatePopulator, populate_document

TEMPLATE = build_docx(
    plain("title"),
    repeating("people", plain("name")),
    sdt("visible: showNotes", sdt("notes", paragraph(run("notes here")))),
)

DATA = {
    "title": "Team",
    "people": [{"name": "Ann"}, {"name": "Bob"}],
    "showNotes": True,
    "notes": "<ul><li>first</li><li>second</li></ul>",
}


class TestPopulationResult:

    def test_success(self):
        assert PopulationResult(b"").success
        assert not PopulationResult(b"", ["error"]).success


class TestPopulate:
    """Test populate produces a filled .docx."""

    def test_output_is_docx(self):
        result = TemplatePopulator().populate(TEMPLATE, DATA)
        assert zipfile.is_zipfile(io.BytesIO(result.document))
        assert result.success
        assert result.errors == []

    def test_values_written(self):
        result = TemplatePopulator().populate(TEMPLATE, DATA)
        body = body_of(result.document)
        assert "Team" in text_of(body)
        assert "AnnBob" in text_of(body)
        assert "firstsecond" in text_of(body)

    def test_numbering_saved(self):
        result = TemplatePopulator().populate(TEMPLATE, DATA)
        handle = DocumentHandle.open(result.document)
        num_id = next(handle.main_content_root().iter(qn("w:numId"))).get(qn("w:val"))
        declared = [n.get(qn("w:numId")) for n in handle.numbering_root().findall(qn("w:num"))]
        assert num_id in declared

    def test_data_as_json_text(self):
        result = TemplatePopulator().populate(TEMPLATE, json.dumps(DATA))
        assert result.success

    def test_template_from_stream(self):
        result = TemplatePopulator().populate(io.BytesIO(TEMPLATE), DATA)
        assert result.success

    def test_errors_reported(self):
        result = TemplatePopulator().populate(TEMPLATE, {"title": "Only title"})
        assert not result.success
        assert "No data matched placeholder 'people'" in result.errors

    def test_hidden_section(self):
        data = dict(DATA, showNotes=False)
        result = TemplatePopulator().populate(TEMPLATE, data)
        assert "notes" not in [
            t.get(qn("w:val")) for t in body_of(result.document).iter(qn("w:tag"))
        ]

    def test_line_breaks_option(self):
        template = build_docx(plain("address"))
        populator = TemplatePopulator(PopulateOptions(replace_line_breaks=True))
        result = populator.populate(template, {"address": "Main St 1\nOslo"})
        body = body_of(result.document)
        assert len(list(body.iter(qn("w:br")))) == 1

    def test_errors_in_document(self):
        populator = TemplatePopulator(PopulateOptions(show_errors_in_document=True))
        result = populator.populate(TEMPLATE, {"title": "x"})
        body = body_of(result.document)
        assert text_of(body[0]) == "Template errors"
        anchors = [h.get(qn("w:anchor")) for h in body.iter(qn("w:hyperlink"))]
        assert anchors and all(a.startswith(BOOKMARK_PREFIX) for a in anchors)

    def test_invalid_template(self):
        with pytest.raises(InvalidDocumentError):
            TemplatePopulator().populate(b"not a docx", DATA)

    def test_invalid_data(self):
        with pytest.raises(DataError):
            TemplatePopulator().populate(TEMPLATE, "[1, 2, 3]")

    def test_unicode_values(self):
        template = build_docx(plain("greeting"))
        result = TemplatePopulator().populate(template, {"greeting": "Привет, мир"})
        assert text_of(body_of(result.document)) == "Привет, мир"


class TestPopulateFile:
    """Test populate_file reads from disk and writes output."""

    def test_populate_file(self, tmp_path):
        template = tmp_path / "template.docx"
        template.write_bytes(TEMPLATE)
        data = tmp_path / "data.json"
        data.write_text(json.dumps(DATA), encoding="utf-8")
        output = tmp_path / "out" / "filled.docx"

        result = TemplatePopulator().populate_file(template, data, output)

        assert output.exists()
        assert output.read_bytes() == result.document

    def test_string_paths(self, tmp_path):
        template = tmp_path / "template.docx"
        template.write_bytes(TEMPLATE)
        output = tmp_path / "filled.docx"
        TemplatePopulator().populate_file(str(template), DATA, str(output))
        assert output.exists()


class TestPopulateDocument:

    def test_in_place(self):
        handle = DocumentHandle.open(TEMPLATE)
        errors = populate_document(handle, DATA)
        assert len(errors) == 0
        assert "Team" in text_of(handle.main_content_root())

    def test_missing_body(self):
        handle = DocumentHandle.open(TEMPLATE)
        body = handle.document.element.body
        body.getparent().remove(body)
        with pytest.raises(InvalidDocumentError):
            populate_document(handle, DATA)
