"""Word-count based chunking of long documents.

Two chunkers are provided. ``chunk_text`` splits on sentence boundaries and
is used to let the user pick parts of a document. ``chunk_document`` groups
whole paragraphs (or slides a word window) and never splits a ``$...$`` or
``$$...$$`` math span; it is used when a document is processed piecewise by
an LLM and put back together afterwards.
"""
import math
import re
from typing import Dict, List

import config

SENTENCE_BOUNDARY = re.compile(r'(?<=[.!?])\s+')
PARAGRAPH_BREAK = re.compile(r'\n\s*\n')
DISPLAY_MATH = re.compile(r'\$\$[\s\S]+?\$\$')
INLINE_MATH = re.compile(r'\$[^$\n]+\$')
MATH_NOTATION = re.compile(r'\$\$[\s\S]+?\$\$|\$[^$\n]+\$')
# Private-use code points cannot collide with user text or split on whitespace
MATH_PLACEHOLDER = re.compile('\ue000(\\d+)\ue001')

PREVIEW_CHARS = 100


def count_words(text: str) -> int:
    return len(text.split())


def preview(content: str) -> str:
    if len(content) > PREVIEW_CHARS:
        return content[:PREVIEW_CHARS] + '...'
    return content


def chunk_text(text: str, target_chunk_size: int = config.PREVIEW_CHUNK_WORDS) -> List[Dict]:
    """Split ``text`` into chunks of about ``target_chunk_size`` words.

    Whitespace is normalised to single spaces and chunks end on sentence
    boundaries. A sentence longer than the target becomes a chunk on its
    own. Positions are character offsets into the normalised text.
    """
    if target_chunk_size <= 0:
        raise ValueError("target_chunk_size must be positive")
    clean_text = re.sub(r'\s+', ' ', text or '').strip()
    if not clean_text:
        return []

    chunks = []
    current = []
    current_words = 0
    start = 0

    def flush():
        content = ' '.join(current)
        chunks.append({
            'id': len(chunks) + 1,
            'content': content,
            'word_count': current_words,
            'start_position': start,
            'end_position': start + len(content),
            'preview': preview(content),
        })
        return start + len(content) + 1

    for sentence in SENTENCE_BOUNDARY.split(clean_text):
        sentence = sentence.strip()
        if not sentence:
            continue
        sentence_words = count_words(sentence)
        if current and current_words + sentence_words > target_chunk_size:
            start = flush()
            current, current_words = [], 0
        current.append(sentence)
        current_words += sentence_words

    if current:
        flush()
    return chunks


def reconstruct_text(chunks: List[Dict]) -> str:
    """Join the given ``chunk_text`` chunks back together in id order."""
    return ' '.join(chunk['content'] for chunk in sorted(chunks, key=lambda c: c['id']))


def should_chunk(text: str, threshold: int = config.CHUNK_THRESHOLD_WORDS) -> bool:
    return count_words(text or '') > threshold


def has_math_notation(text: str) -> bool:
    return bool(MATH_NOTATION.search(text))


def _protect_math(content: str):
    blocks = []

    def stash(match):
        blocks.append(match.group(0))
        return f'\ue000{len(blocks) - 1}\ue001'

    content = DISPLAY_MATH.sub(stash, content)
    content = INLINE_MATH.sub(stash, content)
    return content, blocks


def _restore_math(text: str, blocks: List[str]) -> str:
    if not blocks:
        return text
    return MATH_PLACEHOLDER.sub(lambda m: blocks[int(m.group(1))], text)


def _last_words(text: str, count: int) -> List[str]:
    if count <= 0:
        return []
    return text.split()[-count:]


def chunk_document(content: str, max_words_per_chunk: int = config.REWRITE_CHUNK_WORDS,
                   overlap_words: int = config.REWRITE_OVERLAP_WORDS,
                   preserve_paragraphs: bool = True, preserve_math: bool = True) -> List[Dict]:
    """Split a large document into chunks for piecewise processing.

    With ``preserve_paragraphs`` whole paragraphs are grouped until the next
    one would push the chunk past ``max_words_per_chunk``; a paragraph longer
    than the limit is kept whole in its own chunk. Otherwise a window of
    ``max_words_per_chunk`` words slides over the text.

    Each new chunk starts with the last ``overlap_words`` words of the
    previous one. ``start_word``/``end_word`` are word offsets into the
    document, overlap included.
    """
    if max_words_per_chunk <= 0:
        raise ValueError("max_words_per_chunk must be positive")
    if overlap_words < 0 or overlap_words >= max_words_per_chunk:
        raise ValueError("overlap_words must be between 0 and max_words_per_chunk - 1")
    if not content or not content.strip():
        return []

    math_blocks = []
    processed = content
    if preserve_math:
        processed, math_blocks = _protect_math(content)

    chunks = []

    def add_chunk(body: str, start_word: int, word_count: int):
        restored = _restore_math(body.strip(), math_blocks)
        chunks.append({
            'id': f'chunk-{len(chunks) + 1}',
            'content': restored,
            'start_word': start_word,
            'end_word': start_word + word_count,
            'word_count': word_count,
            'has_math': has_math_notation(restored),
        })

    if preserve_paragraphs:
        paragraphs = [p.strip() for p in PARAGRAPH_BREAK.split(processed) if p.strip()]
        current = ''
        current_words = 0
        chunk_start = 0
        for paragraph in paragraphs:
            paragraph_words = count_words(paragraph)
            if current and current_words + paragraph_words > max_words_per_chunk:
                add_chunk(current, chunk_start, current_words)
                overlap = _last_words(current, overlap_words)
                chunk_start += current_words - len(overlap)
                if overlap:
                    current = ' '.join(overlap) + '\n\n' + paragraph
                else:
                    current = paragraph
                current_words = len(overlap) + paragraph_words
            else:
                current = current + '\n\n' + paragraph if current else paragraph
                current_words += paragraph_words
        if current.strip():
            add_chunk(current, chunk_start, current_words)
    else:
        words = processed.split()
        step = max_words_per_chunk - overlap_words
        for i in range(0, len(words), step):
            window = words[i:i + max_words_per_chunk]
            add_chunk(' '.join(window), i, len(window))
            if i + max_words_per_chunk >= len(words):
                break

    return chunks


def reassemble_document(processed_chunks: List[str], original_chunks: List[Dict]) -> str:
    if len(processed_chunks) != len(original_chunks):
        raise ValueError("Processed chunks count does not match original chunks count")
    return '\n\n'.join(chunk.strip() for chunk in processed_chunks)


def estimate_processing_time(chunks: List[Dict], seconds_per_chunk: int = config.SECONDS_PER_CHUNK) -> int:
    return len(chunks) * seconds_per_chunk


def document_stats(content: str) -> Dict[str, int]:
    word_count = count_words(content or '')
    return {
        'word_count': word_count,
        'character_count': len(content or ''),
        'paragraph_count': len([p for p in PARAGRAPH_BREAK.split(content or '') if p.strip()]),
        'math_block_count': len(MATH_NOTATION.findall(content or '')),
        'estimated_chunks': math.ceil(word_count / config.REWRITE_CHUNK_WORDS),
    }
