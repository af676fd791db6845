"""Writers that feed the step function of a sequence."""

from collections.abc import Callable
import io

from chunkseq.errors import SequenceTerminated
from chunkseq.types import Chunk
from chunkseq.types import Step


class ActiveFlag:
  """A shared cell recording whether a sink still accepts data.

  One flag is created per sequence run and handed to both the sink and the
  driver. The driver clears it when a step function refuses; the sink checks
  it before every write.
  """

  __slots__ = ("_active",)

  def __init__(self, active: bool = True) -> None:
    self._active = active

  def __bool__(self) -> bool:
    return self._active

  def deactivate(self) -> None:
    self._active = False

  def __repr__(self) -> str:
    return f"ActiveFlag({self._active})"


class SequenceSink(io.RawIOBase):
  """A writer whose writes become steps of a sequence.

  This lets a write algorithm (an encoder, a compressor, a serializer)
  produce a sequence from inside a producer, with no second thread. Writes
  succeed until the consumer stops the sequence, after which every write
  raises `SequenceTerminated` without reaching the step function.

  The sink must not be used outside the producer that owns the step
  function, following the same rules as the step function itself.

  Example:
      >>> def produce(step):
      ...   sink = SequenceSink(step)
      ...   sink.write(b"hello")
      >>> seq = PushSeq(produce)
  """

  def __init__(self, step: Step, active: ActiveFlag | None = None) -> None:
    """Initialize the sink.

    Args:
        step: The step function of the sequence being produced.
        active: A flag shared with the driver of the sequence. If None, a
                fresh active flag is created.
    """
    super().__init__()
    self._step = step
    self.active = active if active is not None else ActiveFlag()

  def writable(self) -> bool:
    return True

  def write(self, data: Chunk) -> int:  # type: ignore[override]
    """Hand a copy of ``data`` to the step function.

    The caller may reuse its buffer as soon as this returns, so exactly the
    requested bytes are copied before the step runs.

    Raises:
        SequenceTerminated: If the sequence was already stopped or the step
                            function refuses this chunk.
    """
    if not self.active:
      raise SequenceTerminated()
    chunk = bytes(data)
    if not self._step(chunk, None):
      self.active.deactivate()
      raise SequenceTerminated()
    return len(chunk)


class FuncWriter:
  """Adapt a plain function to the writer protocol."""

  __slots__ = ("write",)

  def __init__(self, write: Callable[[Chunk], int]) -> None:
    self.write = write
