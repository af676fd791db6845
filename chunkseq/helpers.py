from typing import Any
from typing import TypeGuard

from chunkseq.errors import ShortWriteError
from chunkseq.types import Chunk
from chunkseq.types import SupportsRead
from chunkseq.types import SupportsReadinto
from chunkseq.types import SupportsWriteTo
from chunkseq.types import Writer


def supports_write_to(source: Any) -> TypeGuard[SupportsWriteTo]:
  """Check if a source can transfer itself into a writer.

  Sources with this capability drive their own loop and do not need a
  working buffer to be read from.

  Args:
      source: The byte source to inspect.

  Returns:
      True if the source has a callable ``write_to`` method.
  """
  return isinstance(source, SupportsWriteTo) and callable(source.write_to)


def supports_readinto(source: Any) -> TypeGuard[SupportsReadinto]:
  """Check if a source can fill a caller-supplied buffer.

  Args:
      source: The byte source to inspect.

  Returns:
      True if the source has a callable ``readinto`` method.
  """
  return isinstance(source, SupportsReadinto) and callable(source.readinto)


def supports_read(source: Any) -> TypeGuard[SupportsRead]:
  """Check if a source returns fresh bytes from ``read(size)``."""
  return isinstance(source, SupportsRead) and callable(source.read)


def write_all(writer: Writer, data: Chunk) -> int:
  """Write all of ``data``, retrying after partial writes.

  Writers returning None are taken to have accepted everything, as many
  file-like objects do.

  Args:
      writer: The destination writer.
      data: The bytes to write.

  Returns:
      The number of bytes written, always ``len(data)``.

  Raises:
      ShortWriteError: If the writer accepts zero bytes of a non-empty write.
  """
  total = len(data)
  pending: Chunk = data
  while len(pending):
    n = writer.write(pending)
    if n is None:
      break
    if n <= 0:
      raise ShortWriteError()
    pending = memoryview(pending)[n:]
  return total
