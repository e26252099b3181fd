"""Tests for the FastAPI web service."""

from __future__ import annotations

import json

import pytest
from docx.oxml.ns import qn
from httpx import ASGITransport, AsyncClient

from builders import body_of, build_docx, plain, text_of
from json2docx.server import ERROR_COUNT_HEADER, _content_disposition, app

DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEMPLATE = build_docx(plain("name"), plain("note"))


@pytest.fixture
def client():
    """Create an async test client."""
    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")


def upload(content: bytes = TEMPLATE, name: str = "letter.docx"):
    return {"file": (name, content, DOCX_TYPE)}


@pytest.mark.asyncio
class TestHealthEndpoint:

    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert "version" in data


@pytest.mark.asyncio
class TestValidateEndpoint:

    async def test_valid_document(self, client):
        resp = await client.post("/validate", files=upload())
        assert resp.status_code == 200
        assert resp.json() == {"valid": True}

    async def test_invalid_document(self, client):
        resp = await client.post("/validate", files=upload(b"not a docx"))
        assert resp.status_code == 200
        assert resp.json() == {"valid": False}


@pytest.mark.asyncio
class TestPopulateEndpoint:

    async def test_populate(self, client):
        resp = await client.post(
            "/populate",
            files=upload(),
            data={"data": json.dumps({"name": "Ann", "note": "hi"})},
        )
        assert resp.status_code == 200
        assert resp.headers["content-type"] == DOCX_TYPE
        assert resp.headers[ERROR_COUNT_HEADER] == "0"
        assert 'filename="letter.filled.docx"' in resp.headers["content-disposition"]
        assert text_of(body_of(resp.content)) == "Annhi"

    async def test_error_count_header(self, client):
        resp = await client.post(
            "/populate",
            files=upload(),
            data={"data": json.dumps({"name": "Ann"})},
        )
        assert resp.status_code == 200
        assert resp.headers[ERROR_COUNT_HEADER] == "1"

    async def test_show_errors(self, client):
        resp = await client.post(
            "/populate",
            files=upload(),
            data={"data": "{}", "show_errors": "true"},
        )
        body = body_of(resp.content)
        assert text_of(body[0]) == "Template errors"
        assert body.find(f".//{qn('w:hyperlink')}") is not None

    async def test_replace_line_breaks(self, client):
        resp = await client.post(
            "/populate",
            files=upload(),
            data={
                "data": json.dumps({"name": "Ann", "note": "a\nb"}),
                "replace_line_breaks": "true",
            },
        )
        body = body_of(resp.content)
        assert len(list(body.iter(qn("w:br")))) == 1

    async def test_invalid_document(self, client):
        resp = await client.post(
            "/populate",
            files=upload(b"not a docx"),
            data={"data": "{}"},
        )
        assert resp.status_code == 400

    async def test_invalid_json(self, client):
        resp = await client.post(
            "/populate",
            files=upload(),
            data={"data": "{broken"},
        )
        assert resp.status_code == 400
        assert "invalid JSON" in resp.json()["detail"]

    async def test_missing_data_field(self, client):
        resp = await client.post("/populate", files=upload())
        assert resp.status_code == 422

    async def test_korean_filename(self, client):
        resp = await client.post(
            "/populate",
            files=upload(name="편지.docx"),
            data={"data": "{}"},
        )
        assert resp.status_code == 200
        assert "filename*=UTF-8''" in resp.headers["content-disposition"]


class TestContentDisposition:

    def test_ascii(self):
        assert _content_disposition("a.docx") == 'attachment; filename="a.docx"'

    def test_non_ascii(self):
        header = _content_disposition("편지.docx")
        assert header.startswith("attachment; filename*=UTF-8''")
        assert "%ED%8E%B8" in header
