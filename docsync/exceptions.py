"""Custom exceptions for docsync."""


class DocsyncError(Exception):
    """Base exception for docsync errors."""

    pass


class PageParseError(DocsyncError):
    """A content file cannot be read or parsed into a page."""

    pass


class CatalogError(DocsyncError):
    """The docs directory cannot be loaded."""

    pass


class ConfigError(DocsyncError):
    """A required option is missing or the config file is unusable."""

    pass


class GitError(DocsyncError):
    """Git could not report the staged files."""

    pass


class LinkResolutionError(DocsyncError):
    """A link does not resolve; the message is the reason."""

    pass
