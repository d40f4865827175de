#!/usr/bin/env python3
"""Errors raised while assembling a manual.

Every error carries three operator-facing strings: a short description, the
reason it happened, and a suggestion for getting the run going again. The
pipeline never retries; re-running it after addressing the suggestion resumes
from whatever is already on disk.
"""


class ManualError(Exception):
    description = "The manual could not be assembled."

    def __init__(self, reason=None, suggestion=None):
        self.reason = reason or self.description
        self.suggestion = suggestion or ""
        super().__init__(self.reason)


class MalformedTOC(ManualError):
    description = "The Table of Contents page could not be parsed."

    def __init__(self, reason="The page had an unexpected HTML structure."):
        super().__init__(
            reason,
            "Verify the URL you are passing is correct. (It must be the URL to "
            "the TOC frame specifically, not the manual's main page.) If so, the "
            "site may have changed the format of its Table of Contents page.",
        )


class BadEncoding(MalformedTOC):
    description = "The Table of Contents page was in an unexpected encoding."

    def __init__(self, encoding):
        self.encoding = encoding
        super().__init__(f"The HTML page was not {encoding} encoded.")


class FetchFailed(ManualError):
    description = "A file could not be downloaded."

    def __init__(self, url, cause):
        self.url = url
        self.cause = cause
        super().__init__(
            f"Downloading {url} failed: {cause}",
            "Verify that the site is accessible and the URL is correct. If not, "
            "try removing the book.json file in the working directory and re-running.",
        )


class ConversionFailed(ManualError):
    description = "Failed to convert a PDF to PostScript."

    def __init__(self, url, path=None, cause=None):
        self.url = url
        self.path = path
        self.cause = cause
        where = path or url
        reason = f"pdftops could not convert {where} from PDF to PostScript."
        if cause:
            reason = f"{reason} ({cause})"
        super().__init__(
            reason,
            f"Verify the PDF is properly formatted. If not, try removing {where} "
            "and re-running. You can also try updating Poppler.",
        )


class CouldNotParseDocument(ManualError):
    description = "A PDF could not be parsed."

    def __init__(self, path, cause=None):
        self.path = path
        self.cause = cause
        reason = f"The file at {path} doesn't seem to be a valid PDF file."
        if cause:
            reason = f"{reason} ({cause})"
        super().__init__(
            reason,
            f"Verify the PDF is properly formatted. If not, try removing {path} "
            "and re-running.",
        )


class MergeFailed(ManualError):
    description = "Failed to combine the PostScript files into a PDF."

    def __init__(self, returncode=None, cause=None):
        self.returncode = returncode
        self.cause = cause
        if cause:
            reason = f"GhostScript could not be run: {cause}"
        else:
            reason = f"GhostScript exited with status {returncode} while recombining the PostScript files."
        super().__init__(
            reason,
            "Verify the files in the ps directory of the working directory are properly "
            "formatted. If not, try removing the working directory and re-running. "
            "You can also try updating GhostScript.",
        )


class CorruptSnapshot(ManualError):
    description = "The saved table of contents could not be read."

    def __init__(self, path, cause):
        self.path = path
        self.cause = cause
        super().__init__(
            f"{path} is not a valid manual snapshot: {cause}",
            f"Remove {path} and re-run to download the table of contents again.",
        )


class SectionNotReady(ManualError, RuntimeError):
    description = "A section was not converted."

    def __init__(self, title):
        self.title = title
        super().__init__(
            f"Expected the section {title!r} to be converted, but it wasn't.",
            "This is an internal error: pages were requested before the "
            "normalize stage finished.",
        )


class BookmarkGenerationFailed(ManualError):
    description = "The bookmark descriptor could not be generated."

    def __init__(self, cause):
        self.cause = cause
        super().__init__(
            f"Computing bookmark pages failed: {cause}",
            getattr(cause, "suggestion", ""),
        )
