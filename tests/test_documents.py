"""Tests for text extraction from uploaded files."""
import io
import os
import sys
from types import SimpleNamespace

import pytest
from docx import Document
from werkzeug.datastructures import FileStorage

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import documents  # noqa: E402
import providers  # noqa: E402


def _docx_bytes(*paragraphs):
    doc = Document()
    for paragraph in paragraphs:
        doc.add_paragraph(paragraph)
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def test_file_extension_is_lowercased():
    assert documents.file_extension("Essay.DOCX") == ".docx"
    assert documents.file_extension("") == ""


def test_read_txt_replaces_bad_bytes():
    assert documents.DocumentProcessor.read_txt(b"caf\xe9 ok") == "caf\ufffd ok"


def test_read_docx_joins_non_empty_paragraphs():
    data = _docx_bytes("First paragraph.", "", "Second paragraph.")
    assert documents.DocumentProcessor.read_docx(data) == "First paragraph.\n\nSecond paragraph."


def test_corrupt_docx_raises_document_error():
    with pytest.raises(documents.DocumentError, match="DOCX"):
        documents.DocumentProcessor.read_docx(b"not a zip file")


def test_extract_dispatches_on_extension():
    assert documents.DocumentProcessor.extract(b"plain words", "notes.TXT") == "plain words"


def test_unsupported_extension():
    with pytest.raises(documents.UnsupportedFileError, match=".exe"):
        documents.DocumentProcessor.extract(b"MZ", "tool.exe")


def test_transcription_needs_openai_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(providers.ProviderNotConfiguredError):
        documents.DocumentProcessor.transcribe_audio(b"\x00\x01", "memo.mp3")


def test_audio_files_are_transcribed(monkeypatch):
    monkeypatch.setattr(
        documents.DocumentProcessor, "transcribe_audio",
        staticmethod(lambda data, filename: f"heard {filename}"),
    )
    assert documents.DocumentProcessor.extract(b"...", "memo.m4a") == "heard memo.m4a"


def test_extract_text_from_upload():
    upload = FileStorage(stream=io.BytesIO(_docx_bytes("One two three.")), filename="../My Essay.docx")
    result = documents.extract_text(upload)
    assert result == {
        "text": "One two three.",
        "originalName": "My_Essay.docx",
        "fileType": "docx",
        "wordCount": 3,
    }


def test_extract_text_rejects_empty_result():
    upload = FileStorage(stream=io.BytesIO(b"   \n"), filename="blank.txt")
    with pytest.raises(documents.DocumentError, match="No text could be extracted"):
        documents.extract_text(upload)


def test_extract_text_requires_a_filename():
    with pytest.raises(documents.DocumentError, match="No file uploaded"):
        documents.extract_text(SimpleNamespace(filename="", read=lambda: b""))
