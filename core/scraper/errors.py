"""
Exceptions raised by the import pipeline.
"""


class ScrapeError(Exception):
    """Base class for import failures."""


class UnsafeURLError(ScrapeError):
    """URL failed validation (bad scheme, private host, ...)."""


class FetchError(ScrapeError):
    """Page could not be downloaded."""


class ExtractionError(ScrapeError):
    """Page downloaded but no usable tea name was found."""


__all__ = ["ScrapeError", "UnsafeURLError", "FetchError", "ExtractionError"]
