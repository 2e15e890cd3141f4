# tests/test_chunker.py
import pytest

from docchat.errors import ChunkingConfigError
from docchat.memory.chunker import chunk_text


class TestChunkBoundaries:
    """Window placement and trimming."""

    def test_empty_text_yields_single_empty_chunk(self):
        assert chunk_text("", 1000, 200) == [""]

    def test_short_text_yields_one_chunk(self):
        assert chunk_text("hello world", 1000, 200) == ["hello world"]

    def test_short_text_is_trimmed(self):
        assert chunk_text("  hello world \n", 1000, 200) == ["hello world"]

    def test_1200_chars_yield_two_overlapping_chunks(self):
        text = "a" * 1200

        chunks = chunk_text(text, 1000, 200)

        assert len(chunks) == 2
        assert chunks[0] == text[:1000]
        assert chunks[1] == text[800:]
        assert len(chunks[1]) == 400

    def test_starts_advance_by_size_minus_overlap(self, text_2500):
        chunks = chunk_text(text_2500, 1000, 200)

        assert len(chunks) == 4
        for i, chunk in enumerate(chunks):
            assert chunk == text_2500[i * 800:i * 800 + 1000]

    def test_last_chunk_reaches_end_of_text(self, text_2500):
        chunks = chunk_text(text_2500, 1000, 200)

        assert text_2500.endswith(chunks[-1])

    def test_neighbours_share_overlap(self, text_2500):
        chunks = chunk_text(text_2500, 1000, 200)

        for left, right in zip(chunks, chunks[1:]):
            assert left[800:] == right[:200]

    def test_zero_overlap_partitions_text(self):
        text = "0123456789" * 3

        assert chunk_text(text, 10, 0) == ["0123456789"] * 3

    def test_defaults_are_1000_and_200(self):
        text = "b" * 1200

        assert chunk_text(text) == chunk_text(text, 1000, 200)


class TestWhitespaceHandling:
    """Blank windows are dropped, never padded."""

    def test_whitespace_tail_is_dropped(self):
        text = "abcdefghij" + " " * 10

        assert chunk_text(text, 10, 0) == ["abcdefghij"]

    def test_blank_window_in_the_middle_is_skipped(self):
        text = "abcde" + " " * 10 + "vwxyz"

        assert chunk_text(text, 5, 0) == ["abcde", "vwxyz"]

    def test_whitespace_only_text_returns_raw_text(self):
        text = "   \n\t  "

        assert chunk_text(text, 1000, 200) == [text]

    def test_no_chunk_is_blank_when_content_exists(self):
        text = "word " * 700

        chunks = chunk_text(text, 100, 20)

        assert chunks
        assert all(chunk.strip() == chunk and chunk for chunk in chunks)


class TestConfigurationGuard:
    """Configurations that cannot advance are rejected up front."""

    @pytest.mark.parametrize("size, overlap", [
        (1000, 1000),
        (1000, 1200),
        (0, 0),
        (-5, 0),
        (100, -1),
    ])
    def test_invalid_configuration_raises(self, size, overlap):
        with pytest.raises(ChunkingConfigError):
            chunk_text("some text", size, overlap)

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            chunk_text("some text", 10, 10)

    def test_guard_applies_to_empty_text(self):
        with pytest.raises(ChunkingConfigError):
            chunk_text("", 200, 200)


class TestDeterminism:

    def test_same_input_same_chunks(self, text_2500):
        first = chunk_text(text_2500, 300, 50)
        second = chunk_text(text_2500, 300, 50)

        assert first == second
