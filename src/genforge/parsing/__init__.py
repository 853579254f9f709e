"""
genforge.parsing - Pure Text Parsers
====================================

Synchronous, side-effect-free parsers applied to generated text:

    - language:            classify_path() : file path → ContentType
    - artifact_extractor:  extract_files() : generation buffer → FileSet
    - json_extractor:      extract_structured() / extract_model() : prose → JSON object
"""

from genforge.parsing.artifact_extractor import (
    BoundaryScanner,
    BoundaryToken,
    TokenKind,
    extract_files,
    normalize_path,
)
from genforge.parsing.json_extractor import extract_model, extract_structured
from genforge.parsing.language import classify_path

__all__ = [
    "BoundaryScanner",
    "BoundaryToken",
    "TokenKind",
    "classify_path",
    "extract_files",
    "extract_model",
    "extract_structured",
    "normalize_path",
]
