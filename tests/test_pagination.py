"""
Tests for page numbering across chapters and sections (src/pagination.py)
"""

import pytest

from artifact_store import ArtifactStore
from conftest import FakeTools
from manual_errors import SectionNotReady
from pagination import Paginator


def normalize_all(store, manual):
    for chapter, section in manual.sections():
        store.ensure_parent(store.normalized_path(chapter, section)).write_text("%!PS")


@pytest.fixture
def store(tmp_path):
    return ArtifactStore(tmp_path)


def test_scenario_front_matter_then_intro(store, sample_manual):
    tools = FakeTools(pages={"01-01 Overview": 3, "01-02 Scope": 2})
    normalize_all(store, sample_manual)
    paginator = Paginator(sample_manual, store, tools.count_pages)

    front, intro = sample_manual.chapters
    overview, scope = intro.sections
    assert paginator.chapter_first_page(front) == 1
    assert paginator.chapter_pages(front) == 0
    assert paginator.chapter_first_page(intro) == 1
    assert paginator.section_first_page(intro, overview) == 1
    assert paginator.section_first_page(intro, scope) == 4
    assert paginator.chapter_pages(intro) == 5


def test_prefix_sum_properties(store, two_chapter_manual):
    tools = FakeTools(pages={"Title Page": 2, "Log of Temporary Revisions": 1,
                             "05-00 General": 7, "05-10 Inspections-Checks": 4, "05-20 Overhaul": 9})
    normalize_all(store, two_chapter_manual)
    paginator = Paginator(two_chapter_manual, store, tools.count_pages)

    chapters = two_chapter_manual.chapters
    assert paginator.chapter_first_page(chapters[0]) == 1
    for chapter in chapters:
        sections = chapter.sections
        assert paginator.chapter_pages(chapter) == sum(paginator.section_pages(chapter, s) for s in sections)
        assert paginator.section_first_page(chapter, sections[0]) == paginator.chapter_first_page(chapter)
        for s1, s2 in zip(sections, sections[1:]):
            assert paginator.section_first_page(chapter, s2) == \
                paginator.section_first_page(chapter, s1) + paginator.section_pages(chapter, s1)
    for c1, c2 in zip(chapters, chapters[1:]):
        assert paginator.chapter_first_page(c2) == paginator.chapter_first_page(c1) + paginator.chapter_pages(c1)

    assert paginator.chapter_first_page(chapters[1]) == 4
    assert paginator.section_first_page(chapters[1], chapters[1].sections[2]) == 15


def test_oracle_called_once_per_section(store, two_chapter_manual):
    tools = FakeTools()
    normalize_all(store, two_chapter_manual)
    paginator = Paginator(two_chapter_manual, store, tools.count_pages)

    total = paginator.paginate()
    paginator.paginate()
    last_chapter = two_chapter_manual.chapters[-1]
    paginator.section_first_page(last_chapter, last_chapter.sections[-1])

    assert total == 5
    assert sorted(tools.page_counts) == sorted(
        ["Title Page", "Log of Temporary Revisions", "05-00 General",
         "05-10 Inspections-Checks", "05-20 Overhaul"])


def test_oracle_reads_downloaded_pdf(store, sample_manual):
    seen = []
    normalize_all(store, sample_manual)
    intro = sample_manual.chapters[1]
    Paginator(sample_manual, store, lambda p: seen.append(p) or 1).section_pages(intro, intro.sections[0])
    assert seen == [store.source_path(intro, intro.sections[0])]


def test_section_not_ready(store, sample_manual):
    paginator = Paginator(sample_manual, store, FakeTools().count_pages)
    intro = sample_manual.chapters[1]
    with pytest.raises(SectionNotReady):
        paginator.section_first_page(intro, intro.sections[1])
