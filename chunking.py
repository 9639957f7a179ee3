"""
Sentence-aligned transcript chunker.

Chunks are returned as substrings of the original text so that the
whitespace between consecutive chunks is the only thing dropped.
"""

import re
from typing import List, Optional, Tuple

from config import Config

# Sentence-terminal punctuation followed by whitespace
_SENTENCE_BREAK_RE = re.compile(r'(?<=[.!?])\s+')


def split_sentences(text: str) -> List[Tuple[int, int]]:
    """Return (start, end) spans of the sentences in text, whitespace excluded."""
    start = len(text) - len(text.lstrip())
    end = len(text.rstrip())
    if start >= end:
        return []

    spans = []
    pos = start
    for m in _SENTENCE_BREAK_RE.finditer(text, start, end):
        if m.start() > pos:
            spans.append((pos, m.start()))
        pos = m.end()
    if pos < end:
        spans.append((pos, end))
    return spans


def chunk_spans(text: str, max_chars: int) -> List[Tuple[int, int]]:
    """
    Group sentence spans into chunks no longer than max_chars.

    A sentence that would push the current chunk past max_chars starts a
    new chunk. A single sentence longer than max_chars becomes its own
    chunk, untruncated.
    """
    if max_chars < 1:
        raise ValueError(f"max_chars must be positive, got {max_chars}")

    chunks = []
    current = None
    for s, e in split_sentences(text):
        if current is None:
            current = (s, e)
        elif e - current[0] > max_chars:
            chunks.append(current)
            current = (s, e)
        else:
            current = (current[0], e)
    if current is not None:
        chunks.append(current)
    return chunks


def chunk_text(text: str, max_chars: Optional[int] = None) -> List[str]:
    """Split text into sentence-aligned chunks. Empty input gives []."""
    if not text:
        return []
    if max_chars is None:
        max_chars = Config.CHUNK_MAX_CHARS
    return [text[s:e] for s, e in chunk_spans(text, max_chars)]
