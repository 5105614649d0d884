"""
Chunked decoding of extract bytes.
"""

import codecs
import time
from collections.abc import Callable, Iterator

from liquidation_pipeline.core.errors import FileDecodeError
from liquidation_pipeline.observability.logger import get_logger

logger = get_logger(__name__)

ChunkCallback = Callable[[float], None]


class FileReader:
    """
    Decodes extract bytes in fixed-size chunks.

    Encodings are tried in order; the first that decodes the whole input
    wins. A callback receives the fraction of bytes decoded after every
    chunk, and control is yielded to other threads between chunks.
    """

    def __init__(self, encodings: list[str] | tuple[str, ...] = ("utf-8-sig", "cp1252"), chunk_size: int = 1024 * 1024):
        if not encodings:
            raise ValueError("At least one encoding is required")
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.encodings = list(encodings)
        self.chunk_size = chunk_size

    def iter_chunks(self, data: bytes, encoding: str) -> Iterator[tuple[str, int]]:
        """
        Yield (decoded text, bytes consumed so far) per chunk.

        Raises:
            UnicodeDecodeError: If the data is invalid in this encoding
        """
        decoder = codecs.getincrementaldecoder(encoding)(errors="strict")
        total = len(data)
        offset = 0
        while offset < total:
            end = min(offset + self.chunk_size, total)
            text = decoder.decode(data[offset:end], final=end == total)
            offset = end
            yield text, offset
        if total == 0:
            yield decoder.decode(b"", final=True), 0

    def decode(self, data: bytes, on_chunk: ChunkCallback | None = None, file_name: str | None = None) -> tuple[str, str]:
        """
        Decode the whole input.

        Args:
            data: Raw bytes
            on_chunk: Called with the decoded fraction (0..1) after each chunk
            file_name: For error messages

        Returns:
            (decoded text, encoding used)

        Raises:
            FileDecodeError: If no configured encoding can decode the input
        """
        total = len(data) or 1
        errors = []
        for encoding in self.encodings:
            pieces = []
            try:
                for text, consumed in self.iter_chunks(data, encoding):
                    pieces.append(text)
                    if on_chunk is not None:
                        on_chunk(consumed / total)
                    time.sleep(0)
            except UnicodeDecodeError as e:
                logger.warning(
                    f"Decoding {file_name or 'input'} as {encoding} failed at byte {e.start}",
                    extra={"encoding": encoding},
                )
                errors.append(f"{encoding}: {e.reason} at byte {e.start}")
                continue
            return "".join(pieces), encoding

        raise FileDecodeError(
            f"File could not be decoded ({'; '.join(errors)})",
            file_name=file_name,
        )
