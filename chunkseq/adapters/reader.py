"""Push-to-pull adapter: demand-driven byte sources as sequences."""

from collections.abc import Iterator
from typing import Any

from chunkseq.errors import SequenceTerminated
from chunkseq.helpers import supports_read
from chunkseq.helpers import supports_readinto
from chunkseq.helpers import supports_write_to
from chunkseq.sequence import GeneratorSeq
from chunkseq.sequence import PushSeq
from chunkseq.sink import ActiveFlag
from chunkseq.sink import FuncWriter
from chunkseq.types import DEFAULT_BUFFER_SIZE
from chunkseq.types import Chunk
from chunkseq.types import Seq
from chunkseq.types import Step
from chunkseq.types import SupportsRead
from chunkseq.types import SupportsReadinto
from chunkseq.types import SupportsWriteTo


def seq_from_reader(source: Any, buffer_size: int = DEFAULT_BUFFER_SIZE) -> Seq:
  """Return a sequence that reads from a byte source.

  The source's capabilities are inspected once, here:

  - A source implementing ``write_to`` transfers itself into the sequence
    and no buffer is allocated.
  - A source implementing ``readinto`` fills a single working buffer of
    ``buffer_size`` bytes, which is reused for every chunk.
  - Otherwise ``read(buffer_size)`` is called and its result is yielded.

  A clean end of input ends the sequence; an exception raised by the source
  becomes its terminal error.

  Args:
      source: The byte source to read from.
      buffer_size: Size of the working buffer for the buffered paths.

  Returns:
      A sequence over the source's bytes.

  Raises:
      ValueError: If ``buffer_size`` is not positive.
      TypeError: If the source supports none of the reading methods.
  """
  if buffer_size <= 0:
    raise ValueError(f"buffer_size must be positive, got {buffer_size}")

  if supports_write_to(source):
    return PushSeq(lambda step: _transfer(source, step))
  if supports_readinto(source):
    return GeneratorSeq(lambda: _read_into_buffer(source, buffer_size))
  if supports_read(source):
    return GeneratorSeq(lambda: _read_chunks(source, buffer_size))
  raise TypeError(f"cannot read from {type(source).__name__}: no write_to, readinto or read method")


def _transfer(source: SupportsWriteTo, step: Step) -> None:
  """Let the source write itself into the step function."""
  active = ActiveFlag()

  def write(data: Chunk) -> int:
    if not active:
      raise SequenceTerminated()
    if not step(data, None):
      active.deactivate()
      raise SequenceTerminated()
    return len(data)

  # Failures of the source become the terminal step in PushSeq.drive.
  source.write_to(FuncWriter(write))


def _read_into_buffer(source: SupportsReadinto, buffer_size: int) -> Iterator[Chunk]:
  buf = bytearray(buffer_size)
  view = memoryview(buf)
  chunks = view.toreadonly()
  while True:
    n = source.readinto(view)
    if n is None:
      raise BlockingIOError(f"{type(source).__name__} has no data available")
    if n == 0:
      return
    # The consumer owns this slice only until the next fill.
    yield chunks[:n]


def _read_chunks(source: SupportsRead, buffer_size: int) -> Iterator[Chunk]:
  while True:
    data = source.read(buffer_size)
    if data is None:
      raise BlockingIOError(f"{type(source).__name__} has no data available")
    if not data:
      return
    yield data
