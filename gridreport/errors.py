from __future__ import annotations


class ReportError(Exception):
    """Base class for every error raised by gridreport."""


class ConfigurationError(ReportError):
    pass


class UnknownNameError(ReportError, LookupError):
    pass


class FontError(ReportError):
    pass


class FontSourceError(FontError, FileNotFoundError):
    pass


class FontCacheError(FontError, FileNotFoundError):
    pass


class EncodingUnsupportedError(FontError, ValueError):
    pass


class FontCompileError(FontError):
    pass
