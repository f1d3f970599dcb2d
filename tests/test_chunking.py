"""Tests for sentence chunking, paragraph/word chunking and reassembly."""
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import chunking  # noqa: E402


def _paragraph(word, count):
    return ' '.join([word] * count)


class TestChunkText:
    def test_empty_text_gives_no_chunks(self):
        assert chunking.chunk_text("   \n ") == []

    def test_non_positive_target_rejected(self):
        with pytest.raises(ValueError):
            chunking.chunk_text("One. Two.", 0)

    def test_chunks_break_on_sentences(self):
        text = "One two three. Four five six.  Seven eight nine.\nTen eleven twelve."
        chunks = chunking.chunk_text(text, target_chunk_size=6)
        assert [c["content"] for c in chunks] == [
            "One two three. Four five six.",
            "Seven eight nine. Ten eleven twelve.",
        ]
        assert [c["id"] for c in chunks] == [1, 2]
        assert [c["word_count"] for c in chunks] == [6, 6]

    def test_positions_follow_normalised_text(self):
        chunks = chunking.chunk_text("Alpha beta. Gamma delta.", target_chunk_size=2)
        assert chunks[0]["start_position"] == 0
        assert chunks[0]["end_position"] == len("Alpha beta.")
        assert chunks[1]["start_position"] == chunks[0]["end_position"] + 1

    def test_long_sentence_kept_whole(self):
        sentence = _paragraph("word", 12) + "."
        chunks = chunking.chunk_text("Short one. " + sentence, target_chunk_size=5)
        assert len(chunks) == 2
        assert chunks[1]["word_count"] == 12

    def test_preview_is_truncated(self):
        chunks = chunking.chunk_text("x" * 150 + ".")
        assert chunks[0]["preview"] == "x" * 100 + "..."

    def test_reconstruct_orders_by_id(self):
        chunks = chunking.chunk_text("A b. C d. E f.", target_chunk_size=2)
        assert chunking.reconstruct_text(list(reversed(chunks))) == "A b. C d. E f."


def test_should_chunk_threshold():
    assert not chunking.should_chunk(_paragraph("w", 1000))
    assert chunking.should_chunk(_paragraph("w", 1001))
    assert not chunking.should_chunk(None)


class TestChunkDocument:
    def test_invalid_sizes_rejected(self):
        with pytest.raises(ValueError):
            chunking.chunk_document("text", max_words_per_chunk=0)
        with pytest.raises(ValueError):
            chunking.chunk_document("text", max_words_per_chunk=10, overlap_words=10)
        with pytest.raises(ValueError):
            chunking.chunk_document("text", max_words_per_chunk=10, overlap_words=-1)

    def test_empty_content(self):
        assert chunking.chunk_document("  ") == []

    def test_paragraphs_grouped_without_overlap(self):
        content = "\n\n".join([_paragraph("a", 4), _paragraph("b", 4), _paragraph("c", 4)])
        chunks = chunking.chunk_document(content, max_words_per_chunk=8, overlap_words=0)
        assert [c["id"] for c in chunks] == ["chunk-1", "chunk-2"]
        assert chunks[0]["content"] == "a a a a\n\nb b b b"
        assert chunks[1]["content"] == "c c c c"
        assert (chunks[1]["start_word"], chunks[1]["end_word"]) == (8, 12)

    def test_overlap_carries_previous_words(self):
        content = "\n\n".join(["one two three four", "five six seven eight"])
        chunks = chunking.chunk_document(content, max_words_per_chunk=5, overlap_words=2)
        assert chunks[1]["content"] == "three four\n\nfive six seven eight"
        assert chunks[1]["start_word"] == 2
        assert chunks[1]["word_count"] == 6

    def test_oversized_paragraph_stays_whole(self):
        content = _paragraph("long", 20) + "\n\n" + "tail"
        chunks = chunking.chunk_document(content, max_words_per_chunk=5, overlap_words=0)
        assert chunks[0]["word_count"] == 20
        assert chunks[1]["content"] == "tail"

    def test_math_spans_never_split(self):
        content = "Let $a + b = c$ hold.\n\n$$\\sum_{i=1}^{n} x_i = y$$\n\nDone."
        chunks = chunking.chunk_document(content, max_words_per_chunk=4, overlap_words=0)
        joined = "\n\n".join(c["content"] for c in chunks)
        assert "$a + b = c$" in joined
        assert "$$\\sum_{i=1}^{n} x_i = y$$" in joined
        assert chunks[0]["has_math"] is True
        assert chunks[-1]["has_math"] is False

    def test_word_window_mode(self):
        content = ' '.join(str(i) for i in range(10))
        chunks = chunking.chunk_document(
            content, max_words_per_chunk=4, overlap_words=1, preserve_paragraphs=False,
        )
        assert [c["content"] for c in chunks] == ["0 1 2 3", "3 4 5 6", "6 7 8 9"]
        assert [c["start_word"] for c in chunks] == [0, 3, 6]

    def test_reassemble_joins_processed_chunks(self):
        chunks = chunking.chunk_document("a b\n\nc d", max_words_per_chunk=2, overlap_words=0)
        assert chunking.reassemble_document([" A B ", "C D"], chunks) == "A B\n\nC D"

    def test_reassemble_length_mismatch(self):
        chunks = chunking.chunk_document("a b\n\nc d", max_words_per_chunk=2, overlap_words=0)
        with pytest.raises(ValueError):
            chunking.reassemble_document(["only one"], chunks)


def test_estimate_processing_time():
    assert chunking.estimate_processing_time([{}, {}, {}]) == 90


def test_document_stats():
    content = "Intro with $x$.\n\nSecond paragraph here."
    stats = chunking.document_stats(content)
    assert stats == {
        "word_count": 6,
        "character_count": len(content),
        "paragraph_count": 2,
        "math_block_count": 1,
        "estimated_chunks": 1,
    }
