"""Tests for field inheritance across classified pages."""

import random
from dataclasses import replace

import pytest

from workflows.inheritance import FIELDS, is_editable, resolve_field, resolve_page, resolve_all
from workflows.page_metadata import Classification, ClassifiedPage, Mode, Page


def _classified(mode, n, **fields):
    return ClassifiedPage(page=Page(page_number=n), classification=Classification(mode=mode, **fields))


@pytest.fixture
def mixed_pages():
    """Envelope, same, document, same, envelope, same."""
    return [
        _classified(Mode.ENVELOPE, 1, date="240101", company_name="Acme",
                    document_type="Invoice", person_name="Yamada"),
        _classified(Mode.SAME, 2, date="999999", company_name="Stale",
                    document_type="Stale", person_name="Stale"),
        _classified(Mode.DOCUMENT, 3, date="240202", company_name="Ignored",
                    document_type="Statement", person_name="Sato"),
        _classified(Mode.SAME, 4),
        _classified(Mode.ENVELOPE, 5, date="240303", company_name="Beta",
                    document_type="Notice"),
        _classified(Mode.SAME, 6),
    ]


class TestEditability:
    """Tests for is_editable()."""

    def test_envelope_owns_everything(self):
        assert all(is_editable(field, Mode.ENVELOPE) for field in FIELDS)

    def test_document_does_not_own_company(self):
        assert is_editable("company_name", Mode.DOCUMENT) is False
        assert is_editable("date", Mode.DOCUMENT) is True
        assert is_editable("document_type", Mode.DOCUMENT) is True
        assert is_editable("person_name", Mode.DOCUMENT) is True

    def test_same_owns_nothing(self):
        assert not any(is_editable(field, Mode.SAME) for field in FIELDS)


class TestResolveField:
    """Tests for resolve_field()."""

    def test_same_page_inherits_from_envelope(self, mixed_pages):
        assert resolve_page(mixed_pages, 1) == {
            "date": "240101",
            "company_name": "Acme",
            "document_type": "Invoice",
            "person_name": "Yamada",
        }

    def test_document_page_keeps_envelope_company(self, mixed_pages):
        assert resolve_page(mixed_pages, 2) == {
            "date": "240202",
            "company_name": "Acme",
            "document_type": "Statement",
            "person_name": "Sato",
        }

    def test_same_after_document(self, mixed_pages):
        assert resolve_page(mixed_pages, 3) == {
            "date": "240202",
            "company_name": "Acme",
            "document_type": "Statement",
            "person_name": "Sato",
        }

    def test_envelope_resets_every_field(self, mixed_pages):
        assert resolve_page(mixed_pages, 5) == {
            "date": "240303",
            "company_name": "Beta",
            "document_type": "Notice",
            "person_name": "",
        }

    def test_leading_same_page_resolves_empty(self):
        pages = [_classified(Mode.SAME, 1, company_name="Acme", date="240101")]
        assert resolve_field("company_name", pages, 0) == ""
        assert resolve_field("date", pages, 0) == ""

    def test_leading_document_page_has_no_company(self):
        pages = [_classified(Mode.DOCUMENT, 1, company_name="Acme", date="240101")]
        assert resolve_field("company_name", pages, 0) == ""
        assert resolve_field("date", pages, 0) == "240101"

    def test_unknown_field(self, mixed_pages):
        with pytest.raises(KeyError):
            resolve_field("mode", mixed_pages, 0)


class TestResolveAll:
    """Tests for resolve_all()."""

    def test_matches_resolve_page(self, mixed_pages):
        expected = [resolve_page(mixed_pages, i) for i in range(len(mixed_pages))]
        assert resolve_all(mixed_pages) == expected

    def test_matches_resolve_page_on_random_runs(self):
        rng = random.Random(7)
        for _ in range(20):
            pages = [
                _classified(rng.choice(list(Mode)), n,
                            date=rng.choice(["", "240101", "240202"]),
                            company_name=rng.choice(["", "Acme", "Beta"]),
                            document_type=rng.choice(["", "Invoice"]),
                            person_name=rng.choice(["", "Sato"]))
                for n in range(1, rng.randint(1, 15) + 1)
            ]
            expected = [resolve_page(pages, i) for i in range(len(pages))]
            assert resolve_all(pages) == expected

    def test_resolving_twice_changes_nothing(self, mixed_pages):
        resolved = resolve_all(mixed_pages)
        rewritten = [
            replace(page, classification=replace(page.classification, **values))
            for page, values in zip(mixed_pages, resolved)
        ]
        assert resolve_all(rewritten) == resolved

    def test_empty_run(self):
        assert resolve_all([]) == []
