"""Shared fixtures for mailsort tests."""

import io
import shutil
import tempfile

import pytest
from pypdf import PdfWriter

from mailsort import MailSort


@pytest.fixture(autouse=True)
def reset_mailsort():
    """Run every test with default configuration and no UI."""
    MailSort.reset()
    MailSort.set_app(None)
    yield
    MailSort.reset()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    dir_path = tempfile.mkdtemp(prefix="mailsort_test_")
    yield dir_path
    shutil.rmtree(dir_path, ignore_errors=True)


def make_pdf(page_count: int) -> bytes:
    """Build a PDF of blank pages; page n is 100 + n points wide."""
    writer = PdfWriter()
    for n in range(1, page_count + 1):
        writer.add_blank_page(width=100 + n, height=300)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture
def pdf_factory():
    """Return the blank-page PDF builder."""
    return make_pdf
