import pytest

from mockinterview.services.chunker import chunk_text


@pytest.mark.parametrize("text, chunk_size", [
    ("one two three four five six seven", 3),
    ("  leading\nand trailing \t whitespace  ", 2),
    (" ".join(f"w{i}" for i in range(1001)), 500),
    ("single", 500),
])
def test_chunks_reconstruct_word_sequence(text, chunk_size):
    chunks = chunk_text(text, chunk_size)
    assert " ".join(chunks) == " ".join(text.split())
    assert all(0 < len(chunk.split()) <= chunk_size for chunk in chunks)


def test_chunk_boundaries():
    chunks = chunk_text(" ".join(f"w{i}" for i in range(1001)), 500)
    assert [len(chunk.split()) for chunk in chunks] == [500, 500, 1]
    assert chunks[1].split()[0] == "w500"


@pytest.mark.parametrize("text", ["", "   \n\t  "])
def test_empty_text_gives_no_chunks(text):
    assert chunk_text(text) == []


def test_default_chunk_size_is_500_words():
    assert len(chunk_text(" ".join(["x"] * 600))) == 2


def test_rejects_non_positive_chunk_size():
    with pytest.raises(ValueError):
        chunk_text("some text", 0)
