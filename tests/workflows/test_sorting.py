"""End-to-end tests for the sorting workflow using a local outbox."""

import io
import json
import os

import pytest
from openpyxl import Workbook
from pypdf import PdfReader

from mailsort import MailSort
from storage import LocalDriver
from workflows.page_metadata import Classification, Mode, Page
from workflows.review_file import save_review, load_review
from workflows.suggester import DEFAULT_CATEGORY
from workflows.sorting import (
    load_configured_company_list,
    suggest_bundle,
    process_bundle,
    process_inbox,
    _page_ranges,
)


def _widths(data):
    return [round(float(page.mediabox.width)) for page in PdfReader(io.BytesIO(data)).pages]


@pytest.fixture
def outbox(temp_dir):
    """Configure a local outbox with the sort log enabled."""
    driver = LocalDriver(os.path.join(temp_dir, "outbox"), create=True)
    MailSort.outbox_driver = driver
    MailSort.log = True
    MailSort.run_date = "240101"
    return driver


@pytest.fixture
def reviewed_sheet(temp_dir):
    """Review sheet for a four-page bundle with two envelopes and one excluded page."""
    path = os.path.join(temp_dir, "review.json")
    classifications = [
        Classification(mode=Mode.ENVELOPE, date="240101", company_name="Acme", document_type="Invoice"),
        Classification(mode=Mode.SAME),
        Classification(mode=Mode.ENVELOPE, is_excluded=True, date="240102",
                       company_name="Beta", document_type="Notice"),
        Classification(mode=Mode.SAME),
    ]
    save_review(path, "scan.pdf", [Page(n) for n in range(1, 5)], classifications)
    return path


def _read_log(driver):
    logs = driver.list_files("--SortLog/log")
    assert len(logs) == 1
    return driver.read_text(logs[0].path)


class TestProcessBundle:
    """Tests for process_bundle()."""

    def test_reviewed_bundle(self, outbox, reviewed_sheet, pdf_factory):
        manifest = process_bundle(pdf_factory(4), "scan.pdf", review_path=reviewed_sheet)

        assert manifest.ok
        assert [(o.file_name, o.page_numbers) for o in manifest.outputs] == [
            ("240101_Acme_Invoice.pdf", [1, 2]),
            ("240102_Beta_Notice.pdf", [4]),
            ("除外データ.pdf", [3]),
        ]
        assert _widths(outbox.read_bytes("scan/240101_Acme_Invoice.pdf")) == [101, 102]
        assert _widths(outbox.read_bytes("scan/240102_Beta_Notice.pdf")) == [104]
        assert _widths(outbox.read_bytes("scan/除外データ.pdf")) == [103]

    def test_sort_log(self, outbox, reviewed_sheet, pdf_factory):
        process_bundle(pdf_factory(4), "scan.pdf", review_path=reviewed_sheet)
        log = _read_log(outbox)
        assert log.count("Written") == 3
        assert "Dest:   scan/240101_Acme_Invoice.pdf" in log
        assert "Pages:  1, 2" in log

        process_bundle(pdf_factory(4), "scan.pdf", review_path=reviewed_sheet)
        assert _read_log(outbox).count("Replaced") == 3

    def test_no_log_unless_enabled(self, outbox, reviewed_sheet, pdf_factory):
        MailSort.log = False
        process_bundle(pdf_factory(4), "scan.pdf", review_path=reviewed_sheet)
        assert not outbox.file_exists("--SortLog")
        assert outbox.list_files(recursive=True, extension=".log") == []

    def test_suggestions_without_review(self, outbox, pdf_factory):
        manifest = process_bundle(pdf_factory(2), "scan.pdf")

        assert [(o.file_name, o.page_numbers) for o in manifest.outputs] == [
            ("240101_[会社名]_[書類名].pdf", [1, 2]),
        ]
        assert outbox.file_exists("scan/240101_[会社名]_[書類名].pdf")

    def test_review_for_other_bundle(self, outbox, reviewed_sheet, pdf_factory):
        with pytest.raises(ValueError):
            process_bundle(pdf_factory(3), "scan.pdf", review_path=reviewed_sheet)

    def test_unreadable_bundle(self, outbox):
        assert process_bundle(b"not a pdf", "broken.pdf") is None
        assert "ERROR" in _read_log(outbox)

    def test_without_outbox(self, pdf_factory):
        manifest = process_bundle(pdf_factory(1), "scan.pdf")
        assert len(manifest.outputs) == 1


class TestSuggestBundle:
    """Tests for suggest_bundle()."""

    def test_writes_review_sheet(self, temp_dir, pdf_factory):
        pdf_path = os.path.join(temp_dir, "scan.pdf")
        review_path = os.path.join(temp_dir, "scan.json")
        with open(pdf_path, "wb") as f:
            f.write(pdf_factory(3))
        MailSort.run_date = "240301"

        suggested = suggest_bundle(pdf_path, review_path, [])

        assert load_review(review_path) == suggested
        assert [c.mode for c in suggested] == [Mode.ENVELOPE, Mode.SAME, Mode.SAME]
        assert suggested[0].date == "240301"

    def test_sheet_carries_suggested_categories(self, temp_dir, pdf_factory):
        pdf_path = os.path.join(temp_dir, "scan.pdf")
        review_path = os.path.join(temp_dir, "scan.json")
        with open(pdf_path, "wb") as f:
            f.write(pdf_factory(2))

        suggest_bundle(pdf_path, review_path, [])

        with open(review_path, encoding="utf-8") as f:
            entries = json.load(f)["pages"]
        assert [e["category"] for e in entries] == [DEFAULT_CATEGORY, DEFAULT_CATEGORY]
        assert [e["minor_category"] for e in entries] == [DEFAULT_CATEGORY, DEFAULT_CATEGORY]


class TestUniqueOutputs:
    """Every output of a run lands in its own file."""

    @pytest.fixture
    def clashing_sheet(self, temp_dir):
        """Two identical envelopes plus one whose title already ends in _2."""
        path = os.path.join(temp_dir, "clash.json")
        classifications = [
            Classification(mode=Mode.ENVELOPE, date="240101", company_name="Acme", document_type="Invoice"),
            Classification(mode=Mode.ENVELOPE, date="240101", company_name="Acme", document_type="Invoice"),
            Classification(mode=Mode.ENVELOPE, date="240101", company_name="Acme", document_type="Invoice_2"),
        ]
        save_review(path, "scan.pdf", [Page(n) for n in range(1, 4)], classifications)
        return path

    def test_files_on_disk_match_manifest(self, outbox, clashing_sheet, pdf_factory):
        manifest = process_bundle(pdf_factory(3), "scan.pdf", review_path=clashing_sheet)

        names = [o.file_name for o in manifest.outputs]
        assert len(set(names)) == len(names) == 3
        files = outbox.list_files("scan", extension=".pdf")
        assert len(files) == len(manifest.outputs)
        for output in manifest.outputs:
            assert _widths(outbox.read_bytes(f"scan/{output.file_name}")) == [100 + n for n in output.page_numbers]

    def test_no_destination_written_twice(self, outbox, clashing_sheet, pdf_factory):
        process_bundle(pdf_factory(3), "scan.pdf", review_path=clashing_sheet)

        log = _read_log(outbox)
        assert log.count("Written") == 3
        assert "Replaced" not in log


class TestProcessInbox:
    """Tests for process_inbox()."""

    def test_sorts_every_pdf(self, temp_dir, outbox, pdf_factory):
        inbox_path = os.path.join(temp_dir, "inbox")
        os.makedirs(os.path.join(inbox_path, "sub"))
        with open(os.path.join(inbox_path, "a.pdf"), "wb") as f:
            f.write(pdf_factory(1))
        with open(os.path.join(inbox_path, "sub", "b.pdf"), "wb") as f:
            f.write(pdf_factory(2))
        with open(os.path.join(inbox_path, "notes.txt"), "w") as f:
            f.write("not a bundle")

        assert process_inbox(LocalDriver(inbox_path)) == 2
        assert outbox.list_files("a", extension=".pdf")[0].name == "240101_[会社名]_[書類名].pdf"
        assert len(outbox.list_files("b", extension=".pdf")) == 1

    def test_empty_inbox(self, temp_dir, outbox):
        inbox_path = os.path.join(temp_dir, "empty")
        os.makedirs(inbox_path)
        assert process_inbox(LocalDriver(inbox_path)) == 0


class TestCompanyListConfig:
    """Tests for load_configured_company_list()."""

    def test_not_configured(self):
        assert load_configured_company_list() == []

    def test_configured(self, temp_dir):
        path = os.path.join(temp_dir, "companies.xlsx")
        workbook = Workbook()
        workbook.active.append(["取引先"])
        workbook.active.append(["株式会社アクメ"])
        workbook.save(path)

        MailSort.company_list_path = path
        MailSort.company_column = "取引先"
        assert load_configured_company_list() == ["株式会社アクメ"]


class TestPageRanges:
    """Tests for _page_ranges()."""

    def test_ranges(self):
        assert _page_ranges([1, 2, 3, 5]) == "1-3,5"
        assert _page_ranges([4]) == "4"
        assert _page_ranges([]) == ""
