#!/usr/bin/env python3
"""
Assemble a manual from its published sections.

Call the stages in order (or just run()):

    load_or_build()       table of contents, from book.json or the site
    fetch()               download every section PDF
    normalize()           convert every PDF to PostScript
    generate_bookmarks()  write the pdfmark descriptor
    merge()               combine everything into the output PDF

Every stage skips work whose output already exists in the working directory,
so a run that fails part-way can simply be started again.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

import requests
from tqdm import tqdm

from artifact_store import ArtifactStore, ensure_dir
from bookmarks import generate_pdfmarks
from manual_config import DEFAULT_CONFIG
from manual_errors import FetchFailed
from manual_model import Manual
from pagination import Paginator
from pdf_downloader import download_pdf
from pdf_tools import combine, count_pages, pdf_to_ps
from toc_reader import read_toc


class ManualAssembler:
    def __init__(self, toc_url:str, workdir:Path, filename:str=None, config=None, session=None,
                 toc_reader=read_toc, downloader=download_pdf, converter=pdf_to_ps,
                 page_counter=count_pages, combiner=combine, show_progress=False):
        self.config = config or DEFAULT_CONFIG
        self.toc_url = toc_url
        self.store = ArtifactStore(workdir, filename or self.config['default_output'])
        self.session = session or requests.Session()
        self.toc_reader = toc_reader
        self.downloader = downloader
        self.converter = converter
        self.page_counter = page_counter
        self.combiner = combiner
        self.show_progress = show_progress
        self.manual = None
        self._paginator = None

    @property
    def output_path(self) -> Path:
        return self.store.output_path

    @property
    def paginator(self) -> Paginator:
        if self._paginator is None:
            self._paginator = Paginator(self.manual, self.store, self.page_counter)
        return self._paginator

    def load_or_build(self) -> Manual:
        ensure_dir(self.store.workdir)
        self.manual = Manual.load(self.store.snapshot_path)
        if self.manual is None:
            toc = self.toc_reader(self.toc_url, self.session,
                                  self.config['toc_encoding'], self.config['request_timeout'])
            self.manual = Manual.from_toc(toc, self.toc_url, self.config['front_matter_marker'])
            self.manual.persist(self.store.snapshot_path)
        self._paginator = None
        return self.manual

    def is_unavailable(self, chapter, section) -> bool:
        """True for sections the site is known never to serve."""
        known = self.config.get('unavailable_sections', [])
        return section.title in known or section.full_title(chapter) in known

    def fetch(self):
        """Download every section that has not been downloaded yet.

        A failure on a known-unavailable section removes that section from
        the manual; any other failure aborts the stage once all downloads
        have finished.
        """
        pending = [(c, s) for c, s in self.manual.sections() if not self.store.is_fetched(c, s)]
        logging.info(f"Downloading {len(pending)} sections")
        self._each_section(pending, self._fetch_section, 'Downloading')

    def _fetch_section(self, chapter, section) -> bool:
        logging.info(f"-- Downloading {section.title}")
        out_path = self.store.ensure_parent(self.store.source_path(chapter, section))
        try:
            self.downloader(section.url, out_path, self.session, self.config['request_timeout'])
        except FetchFailed as e:
            if self.is_unavailable(chapter, section):
                logging.warning(f"Skipping unavailable section {section.full_title(chapter)}: {e.cause}")
                return True
            raise
        return False

    def normalize(self):
        """Convert every downloaded section that has not been converted yet."""
        pending = [(c, s) for c, s in self.manual.sections() if not self.store.is_normalized(c, s)]
        logging.info(f"Converting {len(pending)} sections to PostScript")
        self._each_section(pending, self._normalize_section, 'Converting')

    def _normalize_section(self, chapter, section) -> bool:
        logging.info(f"-- Converting {section.title}")
        out_path = self.store.ensure_parent(self.store.normalized_path(chapter, section))
        self.converter(self.store.source_path(chapter, section), out_path, section.url, self.config['pdftops'])
        return False

    def generate_bookmarks(self) -> Path:
        generate_pdfmarks(self.manual, self.paginator, self.store.pdfmarks_path, self.config.get('author', ''))
        return self.store.pdfmarks_path

    def merge(self) -> Path:
        return self.combiner(self.store.normalized_paths(self.manual), self.store.pdfmarks_path,
                             self.store.output_path, self.config['ghostscript'])

    def run(self) -> Path:
        logging.info("Reading table of contents")
        self.load_or_build()
        logging.info("Downloading PDFs")
        self.fetch()
        logging.info("Converting PDFs to PostScript files")
        self.normalize()
        logging.info("Combining PostScript files to final PDF")
        self.generate_bookmarks()
        self.merge()
        return self.output_path

    def _each_section(self, pending, handler, desc):
        """Run handler(chapter, section) for every pending section concurrently.

        Workers only read the manual. handler returns True to have its section
        pruned; prunes are applied here once every worker has finished, and
        the first failure (in manual order) is raised after that.
        """
        if not pending:
            return
        order = {(c.key, s.key): i for i, (c, s) in enumerate(pending)}
        to_prune = set()
        failures = []
        with ThreadPoolExecutor(max_workers=len(pending)) as pool:
            futures = {pool.submit(handler, c, s): (c, s) for c, s in pending}
            for future in tqdm(as_completed(futures), total=len(futures), desc=desc,
                               disable=not self.show_progress):
                chapter, section = futures[future]
                try:
                    if future.result():
                        to_prune.add((chapter.key, section.key))
                except Exception as e:
                    logging.error(f"{desc} {section.full_title(chapter)} failed: {e}")
                    failures.append((order[(chapter.key, section.key)], e))

        if to_prune:
            self.manual.prune_sections(lambda c, s: (c.key, s.key) in to_prune, self.store.snapshot_path)
            self._paginator = None
        if failures:
            failures.sort(key=lambda f: f[0])
            raise failures[0][1]
