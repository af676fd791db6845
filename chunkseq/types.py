"""Core types shared by every adapter.

A pull sequence (`Seq`) is a lazily produced stream of `(chunk, error)` steps.
The protocols below describe the byte sources and sinks that the adapters
convert to and from sequences.
"""

from abc import ABC
from abc import abstractmethod
from collections.abc import Callable
from collections.abc import Generator
from collections.abc import Iterator
from typing import Protocol
from typing import TypeAlias
from typing import runtime_checkable

DEFAULT_BUFFER_SIZE = 32 * 1024

Chunk: TypeAlias = bytes | bytearray | memoryview

# A step function receives exactly one of (chunk, error) and returns False to stop.
Step: TypeAlias = Callable[[Chunk | None, Exception | None], bool]

Continuation: TypeAlias = Generator[tuple[Chunk | None, Exception | None], None, None]


@runtime_checkable
class Writer(Protocol):
  """Anything accepting ``write()`` of bytes."""

  def write(self, data: Chunk, /) -> int | None: ...


@runtime_checkable
class WriteCloser(Protocol):
  """A writer that must be closed to flush any trailing output."""

  def write(self, data: Chunk, /) -> int | None: ...

  def close(self) -> None: ...


@runtime_checkable
class SupportsReadinto(Protocol):
  """A demand-driven source that fills a caller-supplied buffer."""

  def readinto(self, buffer: bytearray | memoryview, /) -> int | None: ...


@runtime_checkable
class SupportsRead(Protocol):
  """A demand-driven source that returns up to ``size`` bytes per call."""

  def read(self, size: int = -1, /) -> bytes: ...


@runtime_checkable
class SupportsWriteTo(Protocol):
  """A source able to drive its own write loop into an arbitrary writer."""

  def write_to(self, writer: Writer, /) -> int: ...


class Seq(ABC):
  """
  Abstract base class for all pull sequences.

  Defines the essential contract for a sequence, which is to drive a step
  function once per produced chunk until the producer is exhausted, fails,
  or the step function asks it to stop.

  Chunks handed to a step are only valid for that step: the producer may
  reuse the underlying buffer as soon as the step returns. Callers must not
  mutate a chunk and must copy it if they need it afterwards.
  """

  @abstractmethod
  def drive(self, step: Step) -> None:
    """Run the producer, calling ``step`` for each element.

    Args:
        step: Called with ``(chunk, None)`` for each chunk and ``(None, error)``
              for a terminal failure. Returning False stops the producer,
              which runs its cleanup before ``drive`` returns.
    """
    raise NotImplementedError

  @abstractmethod
  def steps(self) -> Continuation:
    """Return a one-shot continuation over the sequence.

    The continuation is a generator of ``(chunk, error)`` pairs. Closing it
    before exhaustion stops the producer and runs its cleanup.

    Returns:
        A generator positioned before the first step.
    """
    raise NotImplementedError

  def __iter__(self) -> Iterator[Chunk]:
    """Iterate over the chunks of the sequence.

    A terminal error is raised instead of being yielded. The ownership rule
    still applies: each chunk is only valid until the next one is requested.
    """
    continuation = self.steps()
    try:
      for chunk, error in continuation:
        if error is not None:
          raise error
        yield chunk  # type: ignore[misc]
    finally:
      continuation.close()
