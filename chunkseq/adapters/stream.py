"""Pull-to-push adapter: sequences as demand-driven readers."""

import io
import logging
from types import TracebackType

from chunkseq.helpers import write_all
from chunkseq.sequence import copy_seq
from chunkseq.types import DEFAULT_BUFFER_SIZE
from chunkseq.types import Continuation
from chunkseq.types import Seq
from chunkseq.types import Writer

logger = logging.getLogger(__name__)


class StreamReader(io.RawIOBase):
  """A readable raw stream over a sequence.

  The reader starts out holding the sequence itself. The first call to
  ``readinto`` (or anything built on it, such as ``read``) turns it into a
  continuation over the sequence, which is resumed one chunk at a time as
  the caller asks for more bytes. Callers that want everything should use
  ``write_to`` before reading: it drives the sequence directly and never
  creates the continuation.

  The reader must be closed when the caller is done with it, so that an
  unfinished producer gets to run its cleanup. It is also a context manager.

  Example:
      >>> with StreamReader(seq_from_iterable([b"foo", b"bar"])) as reader:
      ...   reader.read()
      b'foobar'
  """

  def __init__(self, seq: Seq) -> None:
    super().__init__()
    self._seq: Seq | None = seq
    self._continuation: Continuation | None = None
    self._data = memoryview(b"")
    self._finished = False
    self._error: Exception | None = None
    self._traceback: TracebackType | None = None

  def readable(self) -> bool:
    return True

  def readinto(self, buffer: bytearray | memoryview) -> int:  # type: ignore[override]
    """Read bytes into ``buffer``.

    Returns:
        The number of bytes copied, 0 once the sequence has ended.

    Raises:
        Exception: The sequence's terminal error, once every byte produced
                   before it has been read. It is raised again by every
                   later call.
    """
    if self._seq is not None:
      self._continuation = self._seq.steps()
      # The bulk transfer path in write_to is no longer available.
      self._seq = None
      logger.debug("created continuation for %s", self)
    if len(buffer) == 0:
      return 0
    while not self._data and not self._finished:
      self._advance()
    if not self._data:
      if self._error is not None:
        self._raise_error()
      return 0
    n = min(len(buffer), len(self._data))
    memoryview(buffer).cast("B")[:n] = self._data[:n]
    self._data = self._data[n:]
    return n

  def _advance(self) -> None:
    """Resume the continuation for the next step."""
    if self._continuation is None:
      self._finished = True
      return
    try:
      chunk, error = next(self._continuation)
    except StopIteration:
      self._finished = True
      return
    except Exception as e:
      self._fail(e)
      return
    if error is not None:
      self._fail(error)
      return
    self._data = memoryview(chunk).cast("B")  # type: ignore[arg-type]

  def _fail(self, error: Exception) -> None:
    self._finished = True
    self._error = error
    self._traceback = error.__traceback__

  def _raise_error(self) -> None:
    # Restores the original traceback so repeated raises do not extend it.
    raise self._error.with_traceback(self._traceback)  # type: ignore[union-attr]

  def write_to(self, writer: Writer) -> int:
    """Write the remaining content of the stream to ``writer``.

    Before any read this drives the sequence straight into the writer;
    afterwards the stream is exhausted. Once reading has started, the
    remaining bytes are copied with ordinary reads.

    Returns:
        The number of bytes written.

    Raises:
        Exception: The sequence's terminal error or the writer's failure.
    """
    if self._seq is not None:
      seq, self._seq = self._seq, None
      self._finished = True
      try:
        return copy_seq(writer, seq)
      except Exception as e:
        self._fail(e)
        raise
    if self._error is not None:
      self._raise_error()
    total = 0
    buf = bytearray(DEFAULT_BUFFER_SIZE)
    while n := self.readinto(buf):
      total += write_all(writer, memoryview(buf)[:n])
    return total

  def close(self) -> None:
    """Release the continuation, stopping the producer if it is unfinished.

    Safe to call more than once, and whether or not anything was read.
    Later reads report end-of-stream, or the error the sequence failed with.
    """
    if self._continuation is not None:
      continuation, self._continuation = self._continuation, None
      continuation.close()
      logger.debug("released continuation for %s", self)
    self._seq = None
    self._finished = True
    self._data = memoryview(b"")
    super().close()


def reader_from_seq(seq: Seq) -> StreamReader:
  """Return a reader over a sequence. The caller must close it."""
  return StreamReader(seq)
