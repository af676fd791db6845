"""Fluent pipeline over a byte source, chaining write-algorithm transforms."""

from collections.abc import Callable
from collections.abc import Iterable
from collections.abc import Iterator
import io
import itertools
from typing import Any

from chunkseq.adapters.reader import seq_from_reader
from chunkseq.adapters.stream import StreamReader
from chunkseq.adapters.transform import Transform
from chunkseq.adapters.transform import pipe_seq_through
from chunkseq.helpers import supports_read
from chunkseq.helpers import supports_readinto
from chunkseq.helpers import supports_write_to
from chunkseq.sequence import copy_seq
from chunkseq.sequence import seq_from_iterable
from chunkseq.types import DEFAULT_BUFFER_SIZE
from chunkseq.types import Chunk
from chunkseq.types import Seq
from chunkseq.types import Writer


class Pipeline:
  """Builds a chain of transforms over a byte source.

  A Pipeline provides a high-level interface over the adapters: it turns
  its source into a sequence, lets transforms be chained onto it, and ends
  with a terminal operation that runs the chain.

  Example:
      >>> import gzip
      >>> data = (Pipeline([b"hello, ", b"world"])
      ...         .through(lambda w: gzip.GzipFile(fileobj=w, mode="wb"))
      ...         .to_bytes())
      >>> gzip.decompress(data)
      b'hello, world'

  Note:
      Nothing runs until a terminal operation is called. A pipeline over a
      one-shot source (a file, an iterator) can only be run once.
  """

  def __init__(self, source: Seq | Iterable[Chunk] | Any, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
    """Initialize a pipeline.

    Args:
        source: One of the following:
                - A `Seq`, used as-is
                - A byte source with ``write_to``, ``readinto`` or ``read``
                - An iterable of chunks
        buffer_size: Size of the working buffer used to read a byte source.

    Raises:
        ValueError: If no source is provided.
        TypeError: If the source is not a supported type.
    """
    if source is None:
      raise ValueError("A data source must be provided to Pipeline.")
    self.buffer_size = buffer_size
    self.seq: Seq = self._as_seq(source)

  def _as_seq(self, source: Any) -> Seq:
    match source:
      case Seq():
        return source
      case bytes() | bytearray() | memoryview():
        return seq_from_iterable([source])
      case _ if supports_write_to(source) or supports_readinto(source) or supports_read(source):
        return seq_from_reader(source, self.buffer_size)
      case _ if isinstance(source, Iterable):
        return seq_from_iterable(source)
      case _:
        raise TypeError(f"Pipeline source must be a Seq, a byte source or an iterable, not {type(source).__name__}")

  def through(self, transform: Transform) -> "Pipeline":
    """Pipe the data through a write algorithm.

    Args:
        transform: Builds the write algorithm around the given writer, e.g.
                   ``lambda w: gzip.GzipFile(fileobj=w, mode="wb")``.

    Returns:
        The pipeline instance for method chaining.
    """
    self.seq = pipe_seq_through(self.seq, transform)
    return self

  def apply(self, function: Callable[[Seq], Seq]) -> "Pipeline":
    """Apply any sequence-to-sequence function to the pipeline.

    Args:
        function: Takes the current sequence and returns a new one.

    Returns:
        The pipeline instance for method chaining.

    Raises:
        TypeError: If the function does not return a Seq.
    """
    result = function(self.seq)
    if not isinstance(result, Seq):
      raise TypeError(f"apply() function must return a Seq, not {type(result).__name__}")
    self.seq = result
    return self

  def __iter__(self) -> Iterator[Chunk]:
    """Iterate over the chunks of the pipeline.

    Each chunk is only valid until the next one is requested.
    """
    yield from self.seq

  def to_reader(self) -> StreamReader:
    """Return a reader over the pipeline's output. The caller must close it."""
    return StreamReader(self.seq)

  def to_bytes(self) -> bytes:
    """Run the pipeline and return its whole output."""
    buffer = io.BytesIO()
    copy_seq(buffer, self.seq)
    return buffer.getvalue()

  def copy_to(self, writer: Writer) -> int:
    """Run the pipeline, writing its output to ``writer``.

    Returns:
        The number of bytes written.
    """
    return copy_seq(writer, self.seq)

  def first(self, n: int = 1) -> list[bytes]:
    """Return copies of the first n chunks, stopping the producer afterwards.

    Raises:
        AssertionError: If n is less than 1.
    """
    assert n >= 1, "n must be at least 1"
    chunks = iter(self.seq)
    try:
      return [bytes(chunk) for chunk in itertools.islice(chunks, n)]
    finally:
      chunks.close()  # type: ignore[attr-defined]
