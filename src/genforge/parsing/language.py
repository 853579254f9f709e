"""
genforge.parsing.language - Path → ContentType Classification
===============================================================

Maps a file path to the editor content-type tag by its extension.
The function is total: unknown or missing extensions map to PLAIN.

    .css                              → STYLE
    .js .jsx .mjs .cjs .ts .tsx       → SCRIPT
    .html .htm                        → MARKUP
    .md .markdown                     → DOC
    anything else                     → PLAIN
"""

from __future__ import annotations

from genforge.core.enums import ContentType


_EXTENSION_MAP: dict[str, ContentType] = {
    ".css": ContentType.STYLE,
    ".js": ContentType.SCRIPT,
    ".jsx": ContentType.SCRIPT,
    ".mjs": ContentType.SCRIPT,
    ".cjs": ContentType.SCRIPT,
    ".ts": ContentType.SCRIPT,
    ".tsx": ContentType.SCRIPT,
    ".html": ContentType.MARKUP,
    ".htm": ContentType.MARKUP,
    ".md": ContentType.DOC,
    ".markdown": ContentType.DOC,
}


def classify_path(path: str) -> ContentType:
    """Return the content type for ``path`` based on its extension.

    Matching is case-insensitive. Only the final path segment is inspected,
    so a dot inside a directory name never counts as an extension. A bare
    dotfile such as ".css" is classified by its suffix like any other name.

    Example:
        >>> classify_path("src/App.TSX")
        <ContentType.SCRIPT: 'javascript'>
        >>> classify_path("Dockerfile")
        <ContentType.PLAIN: 'plaintext'>
    """
    name = path.replace("\\", "/").rsplit("/", 1)[-1]
    dot = name.rfind(".")
    if dot < 0:
        return ContentType.PLAIN
    return _EXTENSION_MAP.get(name[dot:].lower(), ContentType.PLAIN)
