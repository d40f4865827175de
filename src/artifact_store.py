#!/usr/bin/env python3
"""Working-directory layout for a manual build.

    <workdir>/book.json                          table of contents snapshot
    <workdir>/pdfs/<chapter>/<section>.pdf       downloaded sections
    <workdir>/ps/<chapter>/<section>.ps          converted sections
    <workdir>/pdfmarks                           bookmark descriptor
    <workdir>/<filename>                         assembled manual

Paths depend only on the chapter and section titles, so a file being present
is the record that the step producing it has finished.
"""
from pathlib import Path

from manual_errors import SectionNotReady


def safe_component(title:str) -> str:
    return title.replace('/', '-')


def ensure_dir(p:Path):
    p.mkdir(parents=True, exist_ok=True)


class ArtifactStore:
    def __init__(self, workdir:Path, filename:str="AMM.pdf"):
        self.workdir = Path(workdir)
        self.snapshot_path = self.workdir / 'book.json'
        self.pdfs_dir = self.workdir / 'pdfs'
        self.ps_dir = self.workdir / 'ps'
        self.pdfmarks_path = self.workdir / 'pdfmarks'
        self.output_path = self.workdir / filename

    def _basename(self, chapter, section, ext:str) -> Path:
        return Path(safe_component(chapter.full_title)) / f"{safe_component(section.full_title(chapter))}.{ext}"

    def source_path(self, chapter, section) -> Path:
        return self.pdfs_dir / self._basename(chapter, section, 'pdf')

    def normalized_path(self, chapter, section) -> Path:
        return self.ps_dir / self._basename(chapter, section, 'ps')

    def is_fetched(self, chapter, section) -> bool:
        return self.source_path(chapter, section).exists()

    def is_normalized(self, chapter, section) -> bool:
        return self.normalized_path(chapter, section).exists()

    def ensure_parent(self, path:Path) -> Path:
        ensure_dir(path.parent)
        return path

    def normalized_paths(self, manual) -> list[Path]:
        """Converted files for every section, in manual order."""
        paths = []
        for chapter, section in manual.sections():
            path = self.normalized_path(chapter, section)
            if not path.exists():
                raise SectionNotReady(section.full_title(chapter))
            paths.append(path)
        return paths
