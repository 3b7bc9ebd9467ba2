"""Text extraction: fetching documents and tokenizing their text."""

from web_similarity.extraction.fetcher import (
    DocumentFetcher,
    HttpDocumentFetcher,
    extract_text,
)
from web_similarity.extraction.tokenizer import TokenMode, tokenize

__all__ = [
    "DocumentFetcher",
    "HttpDocumentFetcher",
    "TokenMode",
    "extract_text",
    "tokenize",
]
