"""Documentation comment parser.

Extracts the free-text description and the ``@tag`` lines from a docstring
(or a ``/** ... */`` block). Standard tags: ``@param``, ``@return``,
``@throws``, ``@author``, ``@since``, ``@version``, ``@deprecated``.
API extensions: ``@apiNote``, ``@apiDescription``, ``@apiResponse <code>``,
``@apiError <code>`` and ``@apiExample``.

Each tag kind is matched with its own pattern over the whole cleaned text,
so a tag that appears in the middle of a prose line is still picked up.
"""

import re

from pydantic import BaseModel

from apidocx.model.base import ResponseDoc

PARAM_PATTERN = re.compile(r"@param[ \t]+(\w+)[ \t]+(.+)")
RETURN_PATTERN = re.compile(r"@return[ \t]+(.+)")
THROWS_PATTERN = re.compile(r"@throws[ \t]+(\w+)[ \t]+(.+)")
AUTHOR_PATTERN = re.compile(r"@author[ \t]+(.+)")
SINCE_PATTERN = re.compile(r"@since[ \t]+(.+)")
VERSION_PATTERN = re.compile(r"@version[ \t]+(.+)")
DEPRECATED_PATTERN = re.compile(r"@deprecated\b[ \t]*(.*)")

API_NOTE_PATTERN = re.compile(r"@apiNote[ \t]+(.+)")
API_DESCRIPTION_PATTERN = re.compile(r"@apiDescription[ \t]+(.+)")
API_RESPONSE_PATTERN = re.compile(r"@apiResponse[ \t]+(\d+)[ \t]+(.+)")
API_ERROR_PATTERN = re.compile(r"@apiError[ \t]+(\d+)[ \t]+(.+)")
API_EXAMPLE_PATTERN = re.compile(r"@apiExample[ \t]+(.+)")


class ParsedComment(BaseModel):
    """Structured content of one documentation comment."""

    description: str = ""
    params: dict[str, str] = {}
    returns: str | None = None
    throws: dict[str, str] = {}
    author: str | None = None
    since: str | None = None
    version: str | None = None
    deprecated: str | None = None  # "" when the tag carries no text
    api_note: str | None = None
    api_description: str | None = None
    api_responses: list[ResponseDoc] = []
    api_errors: list[ResponseDoc] = []
    api_examples: list[str] = []

    @property
    def is_deprecated(self) -> bool:
        return self.deprecated is not None

    @property
    def responses(self) -> list[ResponseDoc]:
        """Declared responses, success entries first."""
        return [*self.api_responses, *self.api_errors]


def parse_comment(comment: str | None) -> ParsedComment:
    """Parse a documentation comment. Missing or blank input gives an empty result."""
    if not comment or not comment.strip():
        return ParsedComment()

    text = clean_comment(comment)

    return ParsedComment(
        description=_extract_description(text),
        params=_pairs(PARAM_PATTERN, text),
        returns=_first(RETURN_PATTERN, text),
        throws=_pairs(THROWS_PATTERN, text),
        author=_first(AUTHOR_PATTERN, text),
        since=_first(SINCE_PATTERN, text),
        version=_first(VERSION_PATTERN, text),
        deprecated=_first(DEPRECATED_PATTERN, text),
        api_note=_first(API_NOTE_PATTERN, text),
        api_description=_first(API_DESCRIPTION_PATTERN, text),
        api_responses=_responses(API_RESPONSE_PATTERN, text),
        api_errors=_responses(API_ERROR_PATTERN, text),
        api_examples=[m.group(1).strip() for m in API_EXAMPLE_PATTERN.finditer(text)],
    )


def clean_comment(comment: str) -> str:
    """Strip ``/**``, ``*/`` and leading ``*`` markers from a comment block."""
    text = re.sub(r"^\s*/\*\*", "", comment)
    text = re.sub(r"\*/\s*$", "", text)
    text = re.sub(r"(?m)^[ \t]*\*[ \t]?", "", text)
    return text.strip()


def _extract_description(text: str) -> str:
    lines = []
    for line in text.splitlines():
        line = line.strip()
        if line.startswith("@"):
            break
        if line:
            lines.append(line)
    return " ".join(lines).strip()


def _first(pattern: re.Pattern, text: str) -> str | None:
    match = pattern.search(text)
    return match.group(1).strip() if match else None


def _pairs(pattern: re.Pattern, text: str) -> dict[str, str]:
    return {m.group(1): m.group(2).strip() for m in pattern.finditer(text)}


def _responses(pattern: re.Pattern, text: str) -> list[ResponseDoc]:
    return [
        ResponseDoc(status_code=int(m.group(1)), description=m.group(2).strip())
        for m in pattern.finditer(text)
    ]
