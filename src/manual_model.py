#!/usr/bin/env python3
"""
Chapter/section hierarchy of a manual and its on-disk snapshot.

A Manual is built once from the site's table of contents and saved as
book.json in the working directory; later runs load it from there instead of
scraping the site again. The only structural change after that is pruning
sections that could not be fetched, and every prune is saved immediately.

Chapters and sections hold no back-references. Anything that needs the
parent (a section's full title, its position among its siblings) takes the
parent as an argument.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from urllib.parse import urljoin

from manual_errors import CorruptSnapshot, MalformedTOC


def number_str(number:int) -> str:
    return f"{number:02d}"


class Section:
    """The smallest downloadable unit: one remote PDF.

    Two sections are equal when their number and title match, whatever their
    URL, so lookups keep working when the site moves a file between runs.
    """

    def __init__(self, number, title:str, url:str):
        self.number = number
        self.title = title
        self.url = url

    @property
    def key(self):
        return (self.number, self.title)

    def __eq__(self, other):
        if not isinstance(other, Section):
            return NotImplemented
        return self.key == other.key

    def __hash__(self):
        return hash(self.key)

    def __repr__(self):
        return f"Section(number={self.number!r}, title={self.title!r})"

    def full_title(self, chapter:"Chapter") -> str:
        if self.number is None:
            return self.title
        return f"{number_str(chapter.number)}-{number_str(self.number)} {self.title}"

    def as_json(self):
        return {"number": self.number, "title": self.title, "url": self.url}

    @classmethod
    def from_json(cls, data):
        number = data["number"]
        if number is not None and not _is_uint(number):
            raise ValueError(f"section number must be a non-negative integer or null, got {number!r}")
        title = data["title"]
        url = data["url"]
        if not isinstance(title, str) or not isinstance(url, str):
            raise ValueError(f"section title and url must be strings, got {title!r}, {url!r}")
        return cls(number, title, url)


class Chapter:
    """An ordered group of sections. Chapter 0 is the front matter."""

    def __init__(self, number:int, title:str, sections=None):
        self.number = number
        self.title = title
        self.sections = list(sections or [])

    @property
    def key(self):
        return (self.number, self.title)

    def __eq__(self, other):
        if not isinstance(other, Chapter):
            return NotImplemented
        return self.key == other.key

    def __hash__(self):
        return hash(self.key)

    def __repr__(self):
        return f"Chapter(number={self.number!r}, title={self.title!r}, sections={len(self.sections)})"

    @property
    def full_title(self) -> str:
        return f"{number_str(self.number)} {self.title}"

    def previous_section(self, section:Section):
        """Return the section before `section`, or None if it is the first."""
        index = self.sections.index(section)
        return self.sections[index - 1] if index > 0 else None

    def as_json(self):
        return {
            "number": self.number,
            "title": self.title,
            "sections": [s.as_json() for s in self.sections],
        }

    @classmethod
    def from_json(cls, data):
        number = data["number"]
        title = data["title"]
        if not _is_uint(number):
            raise ValueError(f"chapter number must be a non-negative integer, got {number!r}")
        if not isinstance(title, str):
            raise ValueError(f"chapter title must be a string, got {title!r}")
        sections = data["sections"]
        if not isinstance(sections, list):
            raise ValueError(f"sections of chapter {title!r} must be a list")
        return cls(number, title, [Section.from_json(s) for s in sections])


class Manual:
    def __init__(self, title:str, chapters=None):
        self.title = title
        self.chapters = list(chapters or [])

    def __eq__(self, other):
        if not isinstance(other, Manual):
            return NotImplemented
        return self.as_json() == other.as_json()

    def __repr__(self):
        return f"Manual(title={self.title!r}, chapters={len(self.chapters)})"

    def sections(self):
        """Yield (chapter, section) pairs in manual order."""
        for chapter in self.chapters:
            for section in chapter.sections:
                yield chapter, section

    def previous_chapter(self, chapter:Chapter):
        """Return the chapter before `chapter`, or None if it is the first."""
        index = self.chapters.index(chapter)
        return self.chapters[index - 1] if index > 0 else None

    def as_json(self):
        return {"title": self.title, "chapters": [c.as_json() for c in self.chapters]}

    @classmethod
    def from_json(cls, data):
        if not isinstance(data, dict):
            raise ValueError("snapshot must be an object")
        title = data["title"]
        chapters = data["chapters"]
        if not isinstance(title, str):
            raise ValueError(f"manual title must be a string, got {title!r}")
        if not isinstance(chapters, list):
            raise ValueError("chapters must be a list")
        return cls(title, [Chapter.from_json(c) for c in chapters])

    @classmethod
    def load(cls, path:Path):
        """Load a saved manual, or return None if nothing has been saved yet.

        Raises CorruptSnapshot if the file exists but is not a manual.
        """
        path = Path(path)
        if not path.exists():
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            manual = cls.from_json(data)
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            raise CorruptSnapshot(path, e) from e
        logging.info(f"Loaded table of contents from {path}: {len(manual.chapters)} chapters")
        return manual

    def persist(self, path:Path):
        """Write the snapshot atomically: readers see the old file or the new one."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(self.as_json(), f, indent=2, ensure_ascii=False)
                f.write('\n')
            os.replace(tmp, path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
        logging.debug(f"Saved table of contents to {path}")

    def prune_sections(self, predicate, path:Path):
        """Remove every section for which predicate(chapter, section) is true, then save.

        Remaining sections keep their numbers; gaps are expected.
        """
        removed = []
        for chapter in self.chapters:
            kept = []
            for section in chapter.sections:
                if predicate(chapter, section):
                    removed.append((chapter, section))
                else:
                    kept.append(section)
            chapter.sections = kept
        for chapter, section in removed:
            logging.warning(f"Removed unavailable section {section.full_title(chapter)} from {chapter.full_title}")
        self.persist(path)
        return removed

    @classmethod
    def from_toc(cls, toc, toc_url:str, front_matter_marker:str="Front Matter"):
        """Build a manual from the structure returned by toc_reader.extract.

        Chapters without an explicit number get the previous chapter's number
        plus one. That guess can silently misnumber chapters if the site's
        format drifts; it is kept because the site has always been regular.
        """
        try:
            title = toc["title"]
            items = toc["items"]
        except (KeyError, TypeError) as e:
            raise MalformedTOC(f"The table of contents is missing {e}.") from e
        if not isinstance(title, str) or not title:
            raise MalformedTOC("The table of contents has no title.")
        if not isinstance(items, list):
            raise MalformedTOC("The table of contents has no list of chapters.")

        manual = cls(title)
        previous = None
        for item in items:
            if not isinstance(item, dict):
                raise MalformedTOC(f"A chapter in the table of contents is not a record: {item!r}")
            chapter_title = item.get("chapter_title")
            if not isinstance(chapter_title, str) or not chapter_title:
                raise MalformedTOC("A chapter in the table of contents has no title.")
            explicit = item.get("chapter_number")
            if explicit is not None and not _is_uint(explicit):
                raise MalformedTOC(f"Chapter {chapter_title!r} has an invalid number: {explicit!r}")
            raw_sections = item.get("sections", [])
            if not isinstance(raw_sections, list):
                raise MalformedTOC(f"Chapter {chapter_title!r} has no list of sections.")
            if chapter_title.startswith(front_matter_marker):
                number = 0
            elif explicit is not None:
                number = explicit
            else:
                number = (previous.number if previous else 0) + 1
            chapter = Chapter(number, chapter_title)

            for raw in raw_sections:
                if not isinstance(raw, dict):
                    raise MalformedTOC(f"A section in {chapter.full_title} is not a record: {raw!r}")
                section_title = raw.get("section_title")
                href = raw.get("href")
                if not isinstance(section_title, str) or not section_title \
                        or not isinstance(href, str) or not href:
                    raise MalformedTOC(f"A section in {chapter.full_title} has no title or link.")
                section_number = raw.get("section_number")
                if section_number is not None and not _is_uint(section_number):
                    raise MalformedTOC(f"Section {section_title!r} in {chapter.full_title} "
                                       f"has an invalid number: {section_number!r}")
                chapter.sections.append(Section(section_number, section_title, urljoin(toc_url, href)))

            manual.chapters.append(chapter)
            previous = chapter

        logging.info(f"Built table of contents for {title!r}: {len(manual.chapters)} chapters, "
                     f"{sum(len(c.sections) for c in manual.chapters)} sections")
        return manual


def _is_uint(value):
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0
