"""
Pytest configuration for the manual assembler.

Puts src/ on the import path and provides a sample table of contents plus
fake collaborators that stand in for the network and the PDF tools.
"""

import sys
import threading
from pathlib import Path

import pytest
from pypdf import PdfWriter

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from manual_errors import ConversionFailed, FetchFailed  # noqa: E402
from manual_model import Chapter, Manual, Section  # noqa: E402

TOC_URL = "http://example.com/tech_pubs/amm/html/ammtoc.html"

SAMPLE_TOC_HTML = """\
<html><body>
<p><b> SR22 Aircraft Maintenance Manual </b></p>
<ul id="x">
  <li>Front Matter
    <ul>
      <li><a href="../fm/title.pdf#page=1">Title Page</a></li>
      <li><a href="../fm/ltr.pdf">Log of Temporary Revisions</a></li>
    </ul>
  </li>
  <li>Chapter 5 - Time Limits
    <ul>
      <li><a href="../05/05-00.pdf">5-00 General</a></li>
      <li><a href="../05/05-10.pdf">5-10 Inspections/Checks</a></li>
    </ul>
  </li>
  <li>Introduction and Warnings
    <ul>
      <li><a href="../06/06-00.pdf">6-00 Dimensions</a></li>
    </ul>
  </li>
</ul>
</body></html>
"""


@pytest.fixture
def sample_toc_html():
    return SAMPLE_TOC_HTML


@pytest.fixture
def make_pdf():
    """Write a real PDF with the given number of blank pages."""
    def _make(path, pages=1):
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        writer = PdfWriter()
        for _ in range(pages):
            writer.add_blank_page(width=612, height=792)
        with open(path, "wb") as f:
            writer.write(f)
        return path
    return _make


def build_sample_manual():
    """Front matter with no sections, then Chapter 1 with two sections."""
    return Manual("Sample Manual", [
        Chapter(0, "Front Matter"),
        Chapter(1, "Intro", [
            Section(1, "Overview", "http://example.com/01/01-01.pdf"),
            Section(2, "Scope", "http://example.com/01/01-02.pdf"),
        ]),
    ])


def build_two_chapter_manual():
    return Manual("Two Chapters", [
        Chapter(0, "Front Matter", [
            Section(None, "Title Page", "http://example.com/fm/title.pdf"),
            Section(None, "Log of Temporary Revisions", "http://example.com/fm/ltr.pdf"),
        ]),
        Chapter(5, "Time Limits", [
            Section(0, "General", "http://example.com/05/05-00.pdf"),
            Section(10, "Inspections/Checks", "http://example.com/05/05-10.pdf"),
            Section(20, "Overhaul", "http://example.com/05/05-20.pdf"),
        ]),
    ])


@pytest.fixture
def sample_manual():
    return build_sample_manual()


@pytest.fixture
def two_chapter_manual():
    return build_two_chapter_manual()


class FakeTools:
    """Records every call made to the network and the external tools."""

    def __init__(self, pages=None, failing_urls=(), failing_conversions=()):
        self.pages = dict(pages or {})
        self.failing_urls = set(failing_urls)
        self.failing_conversions = set(failing_conversions)
        self.downloads = []
        self.conversions = []
        self.page_counts = []
        self.merges = []
        self.toc_reads = []
        self.toc = None
        self._lock = threading.Lock()

    def read_toc(self, url, session, encoding, timeout):
        self.toc_reads.append(url)
        return self.toc

    def download(self, url, out_path, session, timeout):
        with self._lock:
            self.downloads.append(url)
        if url in self.failing_urls:
            raise FetchFailed(url, "HTTP 404")
        Path(out_path).write_bytes(b"%PDF-1.4 fake")
        return out_path

    def convert(self, pdf_path, ps_path, url, tool):
        with self._lock:
            self.conversions.append(url)
        if url in self.failing_conversions:
            raise ConversionFailed(url, pdf_path, "pdftops exited with status 1")
        Path(ps_path).write_text("%!PS fake\n")
        return ps_path

    def count_pages(self, path):
        with self._lock:
            self.page_counts.append(Path(path).stem)
        return self.pages.get(Path(path).stem, 1)

    def combine(self, ps_paths, pdfmarks_path, out_path, tool):
        self.merges.append((list(ps_paths), pdfmarks_path, out_path, tool))
        Path(out_path).write_bytes(b"%PDF-1.4 merged")
        return out_path


@pytest.fixture
def fake_tools():
    return FakeTools()
