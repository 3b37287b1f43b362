"""Shared fixtures: in-memory PDF and DOCX documents, extraction settings."""

from __future__ import annotations

import io
import logging

import pymupdf
import pytest
from docx import Document

from resume_extractor.config.settings import ExtractionSettings

RESUME_LINES = [
    "Jane Doe - Senior Software Engineer",
    "Experience: eight years building Python data pipelines",
    "Skills: Python, SQL, Kubernetes, distributed systems",
    "Education: BSc Computer Science",
]


def _build_pdf(pages: list[str | None], user_pw: str | None = None) -> bytes:
    """Write a PDF with one page per entry; None makes an image-only page."""
    doc = pymupdf.open()
    for text in pages:
        page = doc.new_page()
        if text is None:
            # Stand-in for a scanned page: drawings, no text layer
            page.draw_rect(pymupdf.Rect(50, 50, 550, 750), color=(0, 0, 0), fill=(0.6, 0.6, 0.6))
        else:
            page.insert_text((72, 72), text, fontsize=12)

    options: dict = {}
    if user_pw is not None:
        options = {
            "encryption": pymupdf.PDF_ENCRYPT_RC4_128,
            "owner_pw": f"owner-{user_pw}",
            "user_pw": user_pw,
        }
    data = doc.tobytes(**options)
    doc.close()
    return data


@pytest.fixture
def make_pdf():
    return _build_pdf


@pytest.fixture
def resume_pdf() -> bytes:
    return _build_pdf(["\n".join(RESUME_LINES)])


@pytest.fixture
def scanned_pdf() -> bytes:
    return _build_pdf([None])


@pytest.fixture
def encrypted_pdf() -> bytes:
    return _build_pdf(["\n".join(RESUME_LINES)], user_pw="secret")


@pytest.fixture
def make_docx():
    def _build(paragraphs: list[str], table: list[list[str]] | None = None) -> bytes:
        doc = Document()
        for text in paragraphs:
            doc.add_paragraph(text)
        if table:
            t = doc.add_table(rows=len(table), cols=len(table[0]))
            for r, row in enumerate(table):
                for c, value in enumerate(row):
                    t.cell(r, c).text = value
        buf = io.BytesIO()
        doc.save(buf)
        return buf.getvalue()

    return _build


@pytest.fixture
def settings() -> ExtractionSettings:
    return ExtractionSettings(
        enable_fallback=True,
        timeout_seconds=10.0,
        scanned_text_threshold=30,
        max_file_size_bytes=10_485_760,
    )


@pytest.fixture
def restore_root_logging():
    """Undo setup_logging() changes to the root logger after a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
