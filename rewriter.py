import logging
from typing import Dict, List, Optional

import chunking
import config
import providers

logger = logging.getLogger(__name__)

REWRITE_SYSTEM_PROMPT = """You are an expert document rewriter specializing in academic and scholarly content.
Rewrite the provided text according to the user's custom instructions.

REQUIREMENTS:
1. STRUCTURE: Preserve the logical flow and academic structure unless instructed otherwise
2. ACCURACY: Maintain factual accuracy and scholarly integrity
3. COMPLETENESS: Cover every important point from the original
4. STYLE: Apply the requested modifications in a professional academic tone"""

MATH_RULES = """
MATHEMATICAL NOTATION:
- Preserve existing LaTeX exactly: $inline math$ and $$display math$$
- Convert plain-text mathematical symbols to LaTeX when needed
- Keep equation numbering and references"""

HOMEWORK_SYSTEM_PROMPT = """You are an expert academic tutor and problem solver across all disciplines.
1. Provide full, detailed solutions to ALL questions and problems
2. Use LaTeX for all mathematical expressions: $inline$ and $$display$$
3. Show all work, reasoning and intermediate steps
4. Structure solutions clearly with numbered problems
Return complete solutions without meta-commentary or disclaimers."""

CHAT_SYSTEM_PROMPT = """You are a helpful assistant for analyzing and improving scholarly writing.
Answer the user's question directly. When document context is provided, ground your answer in it."""


def _truncate(text: str, limit: int) -> str:
    if len(text) > limit:
        return text[:limit] + '...[truncated]'
    return text


def create_rewrite_prompt(source_text: str, instructions: str, content_source: Optional[str] = None,
                          style_source: Optional[str] = None) -> str:
    prompt = f"""ORIGINAL DOCUMENT TO REWRITE:
{source_text}

CUSTOM REWRITE INSTRUCTIONS:
{instructions}"""
    if content_source:
        prompt += f"""

ADDITIONAL CONTENT SOURCE (to draw from):
{_truncate(content_source, config.CONTENT_SOURCE_LIMIT)}"""
    if style_source:
        prompt += f"""

STYLE REFERENCE (to emulate):
{_truncate(style_source, config.STYLE_SOURCE_LIMIT)}"""
    prompt += "\n\nReturn ONLY the rewritten content, no explanations or meta-commentary."
    return prompt


def rewrite_document(source_text: str, instructions: str, provider: Optional[str] = None,
                     content_source: Optional[str] = None, style_source: Optional[str] = None,
                     preserve_math: bool = True) -> str:
    if not source_text or not source_text.strip():
        raise ValueError("Source text is required")
    if not instructions or not instructions.strip():
        raise ValueError("Rewrite instructions are required")

    system = REWRITE_SYSTEM_PROMPT
    if preserve_math:
        system += MATH_RULES
    if content_source:
        system += "\n\nA content source is provided. Draw on it to enhance or supplement the rewrite."
    if style_source:
        system += "\n\nA style reference is provided. Emulate its tone, structure and approach."

    prompt = create_rewrite_prompt(source_text, instructions, content_source, style_source)
    return providers.complete(prompt, provider=provider, system=system, temperature=0.7)


def document_chunks(text: str, max_words_per_chunk: int = config.REWRITE_CHUNK_WORDS,
                    preserve_math: bool = True) -> List[Dict]:
    """Chunks as ``rewrite_chunks`` cuts them, so callers can pick ids to rewrite."""
    return chunking.chunk_document(
        text,
        max_words_per_chunk=max_words_per_chunk,
        overlap_words=0,
        preserve_math=preserve_math,
    )


def _chunk_id(value) -> str:
    # bare numbers refer to the chunk at that position
    value = str(value).strip()
    return f'chunk-{value}' if value.isdigit() else value


def rewrite_chunks(text: str, instructions: str, provider: Optional[str] = None,
                   chunk_ids: Optional[List[str]] = None, content_source: Optional[str] = None,
                   style_source: Optional[str] = None, preserve_math: bool = True,
                   max_words_per_chunk: int = config.REWRITE_CHUNK_WORDS) -> Dict:
    """Rewrite a long document chunk by chunk.

    Only the chunks named in ``chunk_ids`` are sent for rewriting (all of
    them when omitted); the rest are kept verbatim. Chunks are cut without
    overlap so the reassembled document contains every passage once.
    """
    chunks = document_chunks(text, max_words_per_chunk, preserve_math)
    if not chunks:
        raise ValueError("Source text is required")

    known_ids = {chunk['id'] for chunk in chunks}
    selected = {_chunk_id(value) for value in chunk_ids} if chunk_ids else known_ids
    unknown = selected - known_ids
    if unknown:
        raise ValueError(f"Unknown chunk ids: {', '.join(sorted(unknown))}")

    processed = []
    for chunk in chunks:
        if chunk['id'] in selected:
            logger.info(f"Rewriting {chunk['id']} ({chunk['word_count']} words)")
            processed.append(rewrite_document(
                chunk['content'], instructions, provider,
                content_source=content_source, style_source=style_source,
                preserve_math=preserve_math,
            ))
        else:
            processed.append(chunk['content'])

    return {
        'text': chunking.reassemble_document(processed, chunks),
        'chunks': [
            {'id': chunk['id'], 'rewritten': chunk['id'] in selected, 'content': content}
            for chunk, content in zip(chunks, processed)
        ],
    }


def solve_homework(assignment_text: str, provider: Optional[str] = None) -> str:
    if not assignment_text or not assignment_text.strip():
        raise ValueError("Assignment text is required")
    prompt = f"""ASSIGNMENT TO COMPLETE:
{assignment_text}

PROVIDE: Complete solutions to all questions, problems, and tasks in this assignment with proper
mathematical notation, detailed explanations, and step-by-step work."""
    return providers.complete(prompt, provider=provider, system=HOMEWORK_SYSTEM_PROMPT, temperature=0.3)


def chat(message: str, context: Optional[str] = None, provider: Optional[str] = None) -> str:
    if not message or not message.strip():
        raise ValueError("Message is required")
    prompt = message
    if context:
        prompt = f"DOCUMENT CONTEXT:\n{_truncate(context, config.CONTENT_SOURCE_LIMIT)}\n\nQUESTION:\n{message}"
    return providers.complete(prompt, provider=provider, system=CHAT_SYSTEM_PROMPT, temperature=0.7)
