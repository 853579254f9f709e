"""
genforge.parsing.artifact_extractor - Generated Text → FileSet
================================================================

The Artifact Extractor turns a (possibly incomplete) generation buffer into a
FileSet. It is re-run from scratch on every received fragment, so it must be
pure, total and cheap.

Two input formats are recognised:

    Multi-artifact (at least one marker line present):

        Sure! Here is the app.           ← preamble, discarded
        FILE-BOUNDARY: src/index.css
        ```css
        body { margin: 0; }
        ```
        FILE-BOUNDARY: src/App.jsx
        export default function App() { ... }

    Legacy single-artifact (no marker line):

        ```html
        <!DOCTYPE html> ...
        ```                               ← may still be missing mid-stream

Mode Detection:
    A marker line is any line whose content, after leading whitespace, starts
    with ``FILE-BOUNDARY:``. The BoundaryScanner walks the buffer line by line
    and yields MARKER / TEXT tokens; the multi-artifact parser consumes those
    tokens. No regex substitution is involved in the multi-artifact grammar.

Streaming Guarantee (legacy mode):
    For a growing buffer b1 ⊂ b2 ⊂ ..., extract_files(bn) is None or a FileSet
    whose single entry extends the previous one. While the closing fence is
    still arriving, a trailing run of one or two backticks is withheld so the
    content never shrinks when the fence completes.

Usage:
    >>> files = extract_files("FILE-BOUNDARY: a.css\\nbody{}")
    >>> files["a.css"].content
    'body{}'
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Iterator, NamedTuple, Optional

import structlog

from genforge.core.enums import ContentType
from genforge.core.models import FileArtifact, FileSet
from genforge.parsing.language import classify_path


# =============================================================================
# Logger
# =============================================================================
logger = structlog.get_logger()


MARKER_PREFIX = "FILE-BOUNDARY:"
DEFAULT_ENTRY_POINT = "public/index.html"

# Legacy fences. The closed form wins over the open (still streaming) form.
_CLOSED_HTML_FENCE = re.compile(r"```html\s*(.*?)\s*```", re.DOTALL)
_OPEN_HTML_FENCE = re.compile(r"```html\s*(.*)", re.DOTALL)
_PARTIAL_CLOSING_FENCE = re.compile(r"\s*`{1,2}$")
_WINDOWS_DRIVE = re.compile(r"^[A-Za-z]:")
_PATH_STRIP_CHARS = " \t\r\n`'\""


# =============================================================================
# Boundary Scanner
# =============================================================================
class TokenKind(str, Enum):
    """Kinds of tokens produced by the BoundaryScanner."""

    MARKER = "marker"
    TEXT = "text"


class BoundaryToken(NamedTuple):
    """One scanned line.

    For MARKER tokens ``value`` is the raw (un-normalized) path text after the
    marker prefix. For TEXT tokens it is the line itself without its newline.
    """

    kind: TokenKind
    value: str


class BoundaryScanner:
    """Line scanner for the FILE-BOUNDARY grammar.

    Example:
        >>> scanner = BoundaryScanner("intro\\nFILE-BOUNDARY: a.css\\nbody{}")
        >>> [t.kind.value for t in scanner]
        ['text', 'marker', 'text']
    """

    def __init__(self, text: str, marker_prefix: str = MARKER_PREFIX) -> None:
        self._text = text
        self._marker_prefix = marker_prefix

    def has_marker(self) -> bool:
        """True if at least one line of the text is a marker line."""
        if self._marker_prefix not in self._text:
            return False
        return any(token.kind is TokenKind.MARKER for token in self)

    def __iter__(self) -> Iterator[BoundaryToken]:
        for line in self._text.split("\n"):
            stripped = line.lstrip()
            if stripped.startswith(self._marker_prefix):
                yield BoundaryToken(TokenKind.MARKER, stripped[len(self._marker_prefix):])
            else:
                yield BoundaryToken(TokenKind.TEXT, line)


# =============================================================================
# Public API
# =============================================================================
def extract_files(
    buffer: str,
    *,
    entry_point_path: str = DEFAULT_ENTRY_POINT,
) -> Optional[FileSet]:
    """Parse a generation buffer into a FileSet.

    Args:
        buffer: Everything received so far from one generation call.
        entry_point_path: Key used for the single file in legacy mode.

    Returns:
        The extracted FileSet, or None when the buffer holds no recognisable
        artifact yet. Never raises for any string input.
    """
    scanner = BoundaryScanner(buffer)
    if scanner.has_marker():
        return _extract_multi(scanner)
    return _extract_legacy(buffer, entry_point_path)


def normalize_path(raw: str) -> Optional[str]:
    """Normalize a marker path, or return None if it must be rejected.

    Surrounding whitespace, backticks and quotes are removed, backslashes
    become forward slashes and any leading ``./`` is dropped. Empty paths,
    absolute paths and paths with a ``..`` segment are rejected.

    Example:
        >>> normalize_path(" `./src\\\\App.jsx` ")
        'src/App.jsx'
        >>> normalize_path("../etc/passwd") is None
        True
    """
    path = raw.strip(_PATH_STRIP_CHARS).replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]

    if not path:
        return None
    if path.startswith("/") or _WINDOWS_DRIVE.match(path):
        return None
    if ".." in path.split("/"):
        return None
    return path


# =============================================================================
# Legacy Single-Artifact Mode
# =============================================================================
def _extract_legacy(buffer: str, entry_point_path: str) -> Optional[FileSet]:
    closed = _CLOSED_HTML_FENCE.search(buffer)
    if closed is not None:
        content = closed.group(1).strip()
    else:
        opened = _OPEN_HTML_FENCE.search(buffer)
        if opened is None:
            return None
        # Hold back the first characters of a closing fence that is still
        # streaming in.
        content = _PARTIAL_CLOSING_FENCE.sub("", opened.group(1).strip())
        if not content:
            return None

    return {
        entry_point_path: FileArtifact(content_type=ContentType.MARKUP, content=content),
    }


# =============================================================================
# Multi-Artifact Mode
# =============================================================================
def _extract_multi(scanner: BoundaryScanner) -> Optional[FileSet]:
    files: FileSet = {}
    current_path: Optional[str] = None
    in_file = False
    body_lines: list[str] = []

    def flush() -> None:
        if in_file and current_path is not None:
            # Re-inserting moves the key to the end so the latest occurrence
            # also determines ordering.
            files.pop(current_path, None)
            files[current_path] = FileArtifact(
                content_type=classify_path(current_path),
                content=_clean_body("\n".join(body_lines)),
            )

    for token in scanner:
        if token.kind is TokenKind.MARKER:
            flush()
            in_file = True
            body_lines = []
            current_path = normalize_path(token.value)
            if current_path is None:
                logger.warning(
                    "file_boundary_path_rejected",
                    raw_path=token.value.strip(),
                )
        elif in_file:
            body_lines.append(token.value)
        # TEXT before the first marker is preamble and is dropped.

    flush()
    return files or None


def _clean_body(body: str) -> str:
    """Strip an optional code fence wrapped around a file body."""
    text = body.strip()
    if text.startswith("```"):
        newline = text.find("\n")
        text = "" if newline < 0 else text[newline + 1:]
    text = text.rstrip()
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()
