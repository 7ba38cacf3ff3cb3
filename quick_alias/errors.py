"""Exceptions raised by Quick Alias services."""


class QuickAliasError(Exception):
    """Base class for every Quick Alias failure."""


class ConfigError(QuickAliasError, ValueError):
    """A setting was rejected, e.g. a file pattern that is not a valid regex."""


class DocumentIOError(QuickAliasError, IOError):
    """A document could not be read."""


class MetadataWriteError(DocumentIOError):
    """A document's front-matter could not be parsed or written back."""


class ResolutionMiss(QuickAliasError):
    """A link target did not resolve to a markdown document."""
