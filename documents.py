import io
import logging
import os
from typing import Dict

from docx import Document
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError
from werkzeug.utils import secure_filename

import config
import providers

logger = logging.getLogger(__name__)


class DocumentError(Exception):
    """Text could not be extracted from an uploaded file."""


class UnsupportedFileError(DocumentError):
    pass


def file_extension(filename: str) -> str:
    return os.path.splitext(filename or '')[1].lower()


class DocumentProcessor:
    @staticmethod
    def read_txt(data: bytes) -> str:
        return data.decode('utf-8', errors='replace')

    @staticmethod
    def read_docx(data: bytes) -> str:
        try:
            doc = Document(io.BytesIO(data))
        except Exception as e:
            # python-docx raises zipfile/lxml/KeyError variants for corrupt files
            raise DocumentError(f"Error reading DOCX file: {e}") from e
        return "\n\n".join(para.text.strip() for para in doc.paragraphs if para.text.strip())

    @staticmethod
    def read_pdf(data: bytes) -> str:
        try:
            pdf = PdfReader(io.BytesIO(data))
            pages = [page.extract_text() or '' for page in pdf.pages]
        except PdfReadError as e:
            raise DocumentError(f"Error reading PDF file: {e}") from e
        return "\n".join(page for page in pages if page.strip())

    @staticmethod
    def transcribe_audio(data: bytes, filename: str) -> str:
        """Transcribe speech with OpenAI Whisper."""
        from openai import OpenAI, OpenAIError

        api_key = config.api_key_for('openai')
        if not api_key:
            raise providers.ProviderNotConfiguredError(
                "OPENAI_API_KEY is not set; audio transcription is unavailable"
            )
        try:
            transcript = OpenAI(api_key=api_key).audio.transcriptions.create(
                model=os.getenv('WHISPER_MODEL', 'whisper-1'),
                file=(filename, data),
            )
        except OpenAIError as e:
            logger.error(f"Whisper transcription failed: {e}")
            raise providers.ProviderError(f"Audio transcription failed: {e}") from e
        return transcript.text

    @classmethod
    def extract(cls, data: bytes, filename: str) -> str:
        extension = file_extension(filename)
        if extension == '.txt':
            return cls.read_txt(data)
        if extension == '.docx':
            return cls.read_docx(data)
        if extension == '.pdf':
            return cls.read_pdf(data)
        if extension in config.AUDIO_EXTENSIONS:
            return cls.transcribe_audio(data, filename)
        allowed = ', '.join(sorted(config.DOCUMENT_EXTENSIONS))
        raise UnsupportedFileError(f"Unsupported file type '{extension or filename}'. Allowed: {allowed}")


def extract_text(file_storage) -> Dict:
    """Extract the text of an uploaded werkzeug ``FileStorage``."""
    filename = secure_filename(file_storage.filename or '')
    if not filename:
        raise DocumentError("No file uploaded")
    data = file_storage.read()
    logger.info(f"File upload received: {filename} ({len(data)} bytes)")

    text = DocumentProcessor.extract(data, filename)
    if not text or not text.strip():
        raise DocumentError("No text could be extracted from the file")

    return {
        'text': text,
        'originalName': filename,
        'fileType': file_extension(filename).lstrip('.'),
        'wordCount': len(text.split()),
    }
