"""Pull sequence implementations and the helpers that drive them."""

from collections.abc import Callable
from collections.abc import Iterable
import functools
import logging
from typing import ParamSpec
from typing import TypeAlias

from greenlet import getcurrent
from greenlet import greenlet

from chunkseq.helpers import write_all
from chunkseq.types import Chunk
from chunkseq.types import Continuation
from chunkseq.types import Seq
from chunkseq.types import Step
from chunkseq.types import Writer

logger = logging.getLogger(__name__)

P = ParamSpec("P")

Producer: TypeAlias = Callable[[], Iterable[Chunk]]
PushBody: TypeAlias = Callable[[Step], None]


class GeneratorSeq(Seq):
  """A sequence whose producer is a generator function.

  The producer yields chunks and raises to fail. Because a generator pauses
  at each ``yield``, the sequence can be both driven and pulled one step at a
  time, with at most one chunk produced ahead of the consumer. Stopping early
  closes the generator, so cleanup in its ``finally`` blocks runs exactly once.

  Example:
      >>> def produce():
      ...   yield b"hello, "
      ...   yield b"world"
      >>> b"".join(bytes(c) for c in GeneratorSeq(produce))
      b'hello, world'
  """

  def __init__(self, producer: Producer) -> None:
    """Initialize the sequence.

    Args:
        producer: A zero-argument callable returning an iterable of chunks,
                  typically a generator function. It is called once per run.
    """
    self._producer = producer

  def steps(self) -> Continuation:
    try:
      chunks = iter(self._producer())
    except Exception as e:
      yield None, e
      return
    try:
      while True:
        try:
          chunk = next(chunks)
        except StopIteration:
          return
        except Exception as e:
          yield None, e
          return
        if chunk is None:
          yield None, TypeError("sequence producer yielded None instead of a chunk")
          return
        yield chunk, None
    finally:
      close = getattr(chunks, "close", None)
      if close is not None:
        close()

  def drive(self, step: Step) -> None:
    continuation = self.steps()
    try:
      for chunk, error in continuation:
        if not step(chunk, error):
          return
    finally:
      continuation.close()


class PushSeq(Seq):
  """A sequence whose producer pushes steps into a callback.

  ``body(step)`` calls ``step`` once per chunk and must stop as soon as it
  returns False. Steps after a refusal or after an error are dropped, and an
  exception escaping the body becomes the terminal error step.

  Pulling a push body step by step (``steps()``) runs it in a greenlet that
  switches back to the consumer on every step, so the body is suspended
  inside its own call stack with its current chunk still valid. Closing the
  continuation early resumes the body with a refusal.
  """

  def __init__(self, body: PushBody) -> None:
    self._body = body

  def drive(self, step: Step) -> None:
    finished = False

    def guarded_step(chunk: Chunk | None, error: Exception | None) -> bool:
      nonlocal finished
      if finished:
        return False
      if error is not None:
        finished = True
        step(None, error)
        return False
      if not step(chunk, None):
        finished = True
        return False
      return True

    try:
      self._body(guarded_step)
    except Exception as e:
      if finished:
        logger.debug("suppressed %r from push body after the sequence ended", e)
        return
      finished = True
      step(None, e)

  def steps(self) -> Continuation:
    def step(chunk: Chunk | None, error: Exception | None) -> bool:
      # Hands the step to the consumer; resumed with its answer.
      return runner.parent.switch((chunk, error))

    runner = greenlet(lambda: self.drive(step))
    resume: tuple[bool, ...] = ()
    try:
      while True:
        runner.parent = getcurrent()
        item = runner.switch(*resume)
        if runner.dead:
          return
        resume = (True,)
        yield item
    finally:
      if runner:
        logger.debug("stopping suspended push body %r", self._body)
        runner.parent = getcurrent()
        runner.switch(False)


def sequence(func: Callable[P, Iterable[Chunk]]) -> Callable[P, GeneratorSeq]:
  """Turn a generator function into a factory of sequences.

  Example:
      >>> @sequence
      ... def repeat(data: bytes, times: int):
      ...   for _ in range(times):
      ...     yield data
      >>> seq = repeat(b"ab", 3)
  """

  @functools.wraps(func)
  def wrapper(*args: P.args, **kwargs: P.kwargs) -> GeneratorSeq:
    return GeneratorSeq(lambda: func(*args, **kwargs))

  return wrapper


def seq_from_iterable(chunks: Iterable[Chunk]) -> GeneratorSeq:
  """Return a sequence over an iterable of chunks.

  A re-iterable source (a list, a tuple) gives a sequence that can be run
  more than once; an iterator gives a one-shot sequence.
  """
  return GeneratorSeq(lambda: chunks)


def empty_seq() -> GeneratorSeq:
  """Return a sequence that ends immediately without producing anything."""
  return GeneratorSeq(tuple)


def copy_seq(writer: Writer, seq: Seq) -> int:
  """Drive a sequence into a writer.

  This is the push-side counterpart of a read/write copy loop: no
  continuation is created, the sequence simply calls into the writer.

  Args:
      writer: The destination for every chunk.
      seq: The sequence to drain.

  Returns:
      The total number of bytes written.

  Raises:
      Exception: The sequence's terminal error, or the writer's failure. In
                 the latter case the sequence is stopped first.
  """
  total = 0
  failure: Exception | None = None

  def step(chunk: Chunk | None, error: Exception | None) -> bool:
    nonlocal total, failure
    if error is not None:
      failure = error
      return False
    try:
      total += write_all(writer, chunk)  # type: ignore[arg-type]
    except Exception as e:
      failure = e
      return False
    return True

  seq.drive(step)
  if failure is not None:
    raise failure
  return total
