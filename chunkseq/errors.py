class ChunkSeqError(Exception):
  """Base class for errors raised by chunkseq."""


class SequenceTerminated(ChunkSeqError):
  """Raised by a sink once the consumer of its sequence has stopped.

  This is how a write algorithm learns that nobody wants its output any more.
  It is never reported to the consumer as a stream error.
  """

  def __init__(self, message: str = "sequence terminated") -> None:
    super().__init__(message)


class ShortWriteError(ChunkSeqError, OSError):
  """Raised when a writer accepts none of the bytes it was given."""

  def __init__(self, message: str = "short write") -> None:
    super().__init__(message)
