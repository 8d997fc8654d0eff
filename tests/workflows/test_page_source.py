"""Tests for PdfPageSource.

PDF fixtures are generated with pypdf so no sample files are needed.
"""

import io
import os

import pytest
from pypdf import PdfReader

from workflows.page_source import ExtractionError, PdfPageSource


def _widths(data):
    return [round(float(page.mediabox.width)) for page in PdfReader(io.BytesIO(data)).pages]


class TestReading:
    """Tests for page_count and pages()."""

    def test_page_count(self, pdf_factory):
        assert PdfPageSource(pdf_factory(3)).page_count == 3

    def test_pages_in_order(self, pdf_factory):
        pages = list(PdfPageSource(pdf_factory(4)).pages())
        assert [p.page_number for p in pages] == [1, 2, 3, 4]

    def test_blank_pages_have_no_text(self, pdf_factory):
        pages = list(PdfPageSource(pdf_factory(2)).pages())
        assert all(p.text.strip() == "" for p in pages)

    def test_from_file(self, pdf_factory, temp_dir):
        path = os.path.join(temp_dir, "scan.pdf")
        with open(path, "wb") as f:
            f.write(pdf_factory(2))
        source = PdfPageSource.from_file(path)
        assert source.page_count == 2
        assert source.name == path

    def test_not_a_pdf(self):
        with pytest.raises(ExtractionError):
            PdfPageSource(b"this is not a pdf", name="junk.pdf")


class TestExtractPages:
    """Tests for extract_pages()."""

    def test_extracts_requested_pages(self, pdf_factory):
        source = PdfPageSource(pdf_factory(5))
        data = source.extract_pages([2, 4, 5])
        assert _widths(data) == [102, 104, 105]

    def test_keeps_requested_order(self, pdf_factory):
        source = PdfPageSource(pdf_factory(3))
        assert _widths(source.extract_pages([3, 1])) == [103, 101]

    def test_out_of_range(self, pdf_factory):
        source = PdfPageSource(pdf_factory(3))
        with pytest.raises(ExtractionError) as exc_info:
            source.extract_pages([2, 9])
        assert exc_info.value.page_numbers == [2, 9]

    def test_zero_is_out_of_range(self, pdf_factory):
        with pytest.raises(ExtractionError):
            PdfPageSource(pdf_factory(1)).extract_pages([0])

    def test_no_pages(self, pdf_factory):
        with pytest.raises(ExtractionError):
            PdfPageSource(pdf_factory(1)).extract_pages([])

    def test_source_unchanged_after_extraction(self, pdf_factory):
        source = PdfPageSource(pdf_factory(3))
        source.extract_pages([1])
        assert _widths(source.extract_pages([1, 2, 3])) == [101, 102, 103]
