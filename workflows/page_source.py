"""Source documents: page text in, page subsets out.

The sorting engine only needs two things from a source bundle: the text of
every page, and a way to cut a new PDF out of a list of page numbers.
"""

import io
from abc import ABC, abstractmethod
from typing import Iterator, List, Sequence

from pypdf import PdfReader, PdfWriter

from .page_metadata import Page, TextItem


class ExtractionError(Exception):
    """Raised when pages cannot be read from or cut out of a source document."""

    def __init__(self, message: str, page_numbers: Sequence[int] = ()) -> None:
        super().__init__(message)
        self.page_numbers = list(page_numbers)


class PageSource(ABC):
    """Abstract source of pages for one bundle."""

    @property
    @abstractmethod
    def page_count(self) -> int:
        pass

    @abstractmethod
    def pages(self) -> Iterator[Page]:
        """Yield every page in source order."""
        pass

    @abstractmethod
    def extract_pages(self, page_numbers: Sequence[int]) -> bytes:
        """Build a new document from the given pages.

        Args:
            page_numbers: 1-based page numbers, in output order

        Returns:
            The new document as bytes

        Raises:
            ExtractionError: If any page cannot be extracted
        """
        pass


class PdfPageSource(PageSource):
    """Page source backed by PDF bytes, using pypdf.

    Every extraction opens its own reader on the immutable source bytes, so
    extract_pages may be called from several threads at once.
    """

    def __init__(self, data: bytes, name: str = "") -> None:
        self.data = data
        self.name = name
        self._page_count = len(self._open().pages)

    @classmethod
    def from_file(cls, path: str) -> "PdfPageSource":
        with open(path, 'rb') as f:
            return cls(f.read(), name=path)

    @property
    def page_count(self) -> int:
        return self._page_count

    def _open(self) -> PdfReader:
        try:
            reader = PdfReader(io.BytesIO(self.data))
            if reader.is_encrypted:
                # Try to decrypt with empty password (handles "view-only" PDFs)
                if not reader.decrypt(""):
                    raise ExtractionError(f"PDF is password-protected: {self.name or 'source'}")
            return reader
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(f"Cannot read PDF {self.name or 'source'}: {e}")

    def pages(self) -> Iterator[Page]:
        reader = self._open()
        for index, pdf_page in enumerate(reader.pages):
            items: List[TextItem] = []

            def visitor(text, cm, tm, font_dict, font_size):
                if text and text.strip():
                    items.append(TextItem(text=text, x=float(tm[4]), y=float(tm[5])))

            try:
                text = pdf_page.extract_text(visitor_text=visitor) or ""
            except Exception:
                # Pages without a usable text layer sort as blank pages
                text = ""
                items = []
            yield Page(page_number=index + 1, text=text, items=tuple(items))

    def extract_pages(self, page_numbers: Sequence[int]) -> bytes:
        if not page_numbers:
            raise ExtractionError("No pages requested", page_numbers)

        invalid = [n for n in page_numbers if n < 1 or n > self._page_count]
        if invalid:
            raise ExtractionError(
                f"Pages {invalid} out of range (document has {self._page_count} pages)",
                page_numbers,
            )

        try:
            reader = self._open()
            writer = PdfWriter()
            for number in page_numbers:
                writer.add_page(reader.pages[number - 1])
            buffer = io.BytesIO()
            writer.write(buffer)
            return buffer.getvalue()
        except ExtractionError as e:
            raise ExtractionError(str(e), page_numbers)
        except Exception as e:
            raise ExtractionError(f"Failed to extract pages {list(page_numbers)}: {e}", page_numbers)
