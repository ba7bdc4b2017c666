"""Exception types raised by apidocx."""


class DocxError(Exception):
    """Base class for apidocx errors."""


class ConfigError(DocxError):
    """A settings file could not be read or did not validate."""


class GenerationError(DocxError):
    """Build-time documentation generation failed."""
