#!/usr/bin/env python3
"""
Page numbers of every chapter and section in the assembled manual.

Pages are a running sum over the whole manual: a section starts where the
previous section in its chapter ended (or where its chapter starts), and a
chapter starts where the previous chapter ended (or at page 1). Nothing here
works until the normalize stage has run.

Results are cached for the lifetime of the Paginator. Build a new one after
pruning the manual.
"""
import logging

from manual_errors import SectionNotReady


class Paginator:
    """Prefix-sum page numbers for one manual.

    A section is only counted once its converted PostScript file exists, but
    the count is read from the section's downloaded PDF: conversion keeps the
    page count, and the page counter reads PDF, not PostScript.
    """

    def __init__(self, manual, store, page_counter):
        """
        manual: the Manual to paginate
        store: ArtifactStore locating each section's files
        page_counter: callable(path) -> int, the page-count oracle
        """
        self.manual = manual
        self.store = store
        self.page_counter = page_counter
        self._pages = {}
        self._first_pages = {}

    def section_pages(self, chapter, section) -> int:
        key = ('section', chapter.key, section.key)
        if key not in self._pages:
            if not self.store.is_normalized(chapter, section):
                raise SectionNotReady(section.full_title(chapter))
            self._pages[key] = self.page_counter(self.store.source_path(chapter, section))
        return self._pages[key]

    def chapter_pages(self, chapter) -> int:
        key = ('chapter', chapter.key)
        if key not in self._pages:
            self._pages[key] = sum(self.section_pages(chapter, s) for s in chapter.sections)
        return self._pages[key]

    def chapter_first_page(self, chapter) -> int:
        key = ('chapter', chapter.key)
        if key not in self._first_pages:
            previous = self.manual.previous_chapter(chapter)
            if previous is None:
                first = 1
            else:
                first = self.chapter_first_page(previous) + self.chapter_pages(previous)
            self._first_pages[key] = first
        return self._first_pages[key]

    def section_first_page(self, chapter, section) -> int:
        key = ('section', chapter.key, section.key)
        if key not in self._first_pages:
            previous = chapter.previous_section(section)
            if previous is None:
                first = self.chapter_first_page(chapter)
            else:
                first = self.section_first_page(chapter, previous) + self.section_pages(chapter, previous)
            self._first_pages[key] = first
        return self._first_pages[key]

    def paginate(self):
        """Fill the cache front to back so later lookups never recurse deeply."""
        for chapter in self.manual.chapters:
            self.chapter_first_page(chapter)
            for section in chapter.sections:
                self.section_first_page(chapter, section)
                self.section_pages(chapter, section)
            self.chapter_pages(chapter)
        total = sum(self.chapter_pages(c) for c in self.manual.chapters)
        logging.info(f"Paginated {len(self.manual.chapters)} chapters: {total} pages")
        return total
