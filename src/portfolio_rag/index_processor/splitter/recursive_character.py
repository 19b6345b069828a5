"""Recursive character-based text chunker.

Splits on the coarsest boundary available (paragraphs, then lines, then
sentences, then words, then characters) and merges the pieces back into
chunks of bounded size with a fixed character overlap.
"""

from loguru import logger

from .base import BaseChunker


class RecursiveCharacterChunker(BaseChunker):
    """Recursively chunks text using a hierarchy of separators.

    Every chunk is at most ``chunk_size`` characters, except when a single
    indivisible piece is itself longer. Each chunk after the first starts
    with the last ``chunk_overlap`` characters of the previous one, so
    dropping that prefix and concatenating reproduces the input exactly.

    Attributes:
        chunk_size: Maximum characters per chunk
        chunk_overlap: Characters repeated from the end of the previous chunk
        separators: Separator strings in order of preference
    """

    DEFAULT_SEPARATORS = [
        "\n\n",  # Paragraphs
        "\n",  # Lines
        ". ",  # Sentences
        " ",  # Words
        "",  # Characters (fallback)
    ]

    def __init__(
        self,
        chunk_size: int = 500,
        chunk_overlap: int = 50,
        separators: list[str] | None = None,
    ):
        """Initialize the recursive character chunker.

        Args:
            chunk_size: Maximum characters per chunk
            chunk_overlap: Characters to overlap between chunks
            separators: Custom separator list (uses defaults if None)

        Raises:
            ValueError: If chunk_size <= 0 or overlap is outside [0, chunk_size)
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if chunk_overlap < 0 or chunk_overlap >= chunk_size:
            raise ValueError("overlap must be in [0, chunk_size)")

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.separators = list(separators) if separators else list(self.DEFAULT_SEPARATORS)

        logger.debug(
            f"Initialized RecursiveCharacterChunker: "
            f"size={chunk_size}, overlap={chunk_overlap}, "
            f"separators={len(self.separators)}"
        )

    def split_text(self, text: str) -> list[str]:
        if not text:
            return []
        if len(text) <= self.chunk_size:
            return [text]

        # Pieces are bounded so that the overlap carry plus one piece fits.
        limit = self.chunk_size - self.chunk_overlap
        pieces = self._split_recursive(text, self.separators, limit)
        chunks = self._merge(pieces)

        logger.debug(f"Split {len(text)} chars into {len(chunks)} chunks")
        return chunks

    def _split_recursive(self, text: str, separators: list[str], limit: int) -> list[str]:
        if len(text) <= limit:
            return [text]

        separator = None
        remaining: list[str] = []
        for i, candidate in enumerate(separators):
            if candidate == "" or candidate in text:
                separator = candidate
                remaining = separators[i + 1:]
                break

        if separator is None:
            return [text]
        if separator == "":
            return list(text)

        result: list[str] = []
        for piece in self._split_keep_separator(text, separator):
            if len(piece) <= limit or not remaining:
                result.append(piece)
            else:
                result.extend(self._split_recursive(piece, remaining, limit))
        return result

    @staticmethod
    def _split_keep_separator(text: str, separator: str) -> list[str]:
        """Split text, attaching each separator to the end of the piece before it."""
        parts = text.split(separator)
        pieces = [part + separator for part in parts[:-1]]
        pieces.append(parts[-1])
        return [piece for piece in pieces if piece]

    def _merge(self, pieces: list[str]) -> list[str]:
        chunks: list[str] = []
        current = ""
        carry_len = 0

        for piece in pieces:
            if len(current) + len(piece) <= self.chunk_size:
                current += piece
                continue

            if len(current) > carry_len:
                chunks.append(current)
                carry = current[-self.chunk_overlap:] if self.chunk_overlap else ""
            else:
                carry = ""

            if carry and len(carry) + len(piece) <= self.chunk_size:
                current = carry + piece
                carry_len = len(carry)
            else:
                # Oversized piece: start fresh without the overlap.
                current = piece
                carry_len = 0

        if len(current) > carry_len:
            chunks.append(current)

        return chunks
