"""Transform composer: run a sequence through a write algorithm.

A write algorithm is anything that wraps a writer and writes its output into
it, such as an encoder or ``gzip.GzipFile``. The functions here turn one into
a sequence-to-sequence transform, without a pipe or a second thread.

## Usage Example

```python
import gzip

compress = transform_seq(lambda w: gzip.GzipFile(fileobj=w, mode="wb"))
compressed = compress(seq_from_reader(open("data.bin", "rb")))

with reader_from_seq(compressed) as reader:
  payload = reader.read()
```
"""

from collections.abc import Callable
import logging
from typing import Any
from typing import TypeAlias

from chunkseq.adapters.reader import seq_from_reader
from chunkseq.adapters.stream import StreamReader
from chunkseq.sequence import PushSeq
from chunkseq.sequence import copy_seq
from chunkseq.sink import ActiveFlag
from chunkseq.sink import SequenceSink
from chunkseq.types import DEFAULT_BUFFER_SIZE
from chunkseq.types import Seq
from chunkseq.types import Step
from chunkseq.types import WriteCloser
from chunkseq.types import Writer

logger = logging.getLogger(__name__)

Transform: TypeAlias = Callable[[Writer], WriteCloser]


def pipe_seq_through(seq: Seq, transform: Transform) -> Seq:
  """Return a sequence of the bytes ``transform`` writes while fed ``seq``.

  ``transform`` is called with a writer once per run of the returned
  sequence. Every chunk of ``seq`` is written to the writer it returns,
  which is closed when ``seq`` is exhausted so that it can write any
  trailing bytes.

  Each write the transform makes is a step of the returned sequence. When
  the consumer stops, that write raises `SequenceTerminated`, the input is
  stopped and the transform is closed.

  Args:
      seq: The input sequence.
      transform: Builds the write algorithm around the given writer.

  Returns:
      A sequence of the transformed bytes. A failure of ``seq`` or of the
      transform becomes its terminal error, unless the consumer had already
      stopped the sequence.
  """

  def body(step: Step) -> None:
    active = ActiveFlag()
    writer = transform(SequenceSink(step, active))
    try:
      copy_seq(writer, seq)
    except Exception:
      if not active:
        _close_after_stop(writer)
      raise
    if active:
      writer.close()
    else:
      _close_after_stop(writer)

  return PushSeq(body)


def _close_after_stop(writer: WriteCloser) -> None:
  """Close a writer whose output nobody reads any more."""
  try:
    writer.close()
  except Exception as e:
    logger.debug("suppressed %r closing %s after the sequence was stopped", e, type(writer).__name__)


def transform_seq(transform: Transform) -> Callable[[Seq], Seq]:
  """Return a function applying ``transform`` to any sequence.

  Example:
      >>> compress = transform_seq(lambda w: gzip.GzipFile(fileobj=w, mode="wb"))
      >>> compressed = compress(seq_from_iterable([b"\\0" * 8192] * 1000))
  """

  def apply(seq: Seq) -> Seq:
    return pipe_seq_through(seq, transform)

  return apply


def pipe_through(source: Any, transform: Transform, buffer_size: int = DEFAULT_BUFFER_SIZE) -> StreamReader:
  """Return a reader of ``source`` piped through ``transform``.

  Only one working buffer of ``buffer_size`` bytes is allocated (none if the
  source can transfer itself), plus whatever state the transform keeps.

  Args:
      source: A byte source accepted by `seq_from_reader`.
      transform: Builds the write algorithm around the given writer.
      buffer_size: Size of the working buffer used to read ``source``.

  Returns:
      A reader of the transformed bytes. The caller must close it.
  """
  return StreamReader(pipe_seq_through(seq_from_reader(source, buffer_size), transform))


def seq_with_content(generate: Callable[[Writer], None]) -> Seq:
  """Return a sequence of whatever ``generate`` writes to its writer.

  An exception raised by ``generate`` becomes the terminal error of the
  sequence, unless the consumer had already stopped it.

  When the sequence is read incrementally, ``generate`` is suspended inside
  each write until the reader asks for more. Once the consumer stops, every
  write raises `SequenceTerminated`.
  """
  return PushSeq(lambda step: generate(SequenceSink(step)))


def reader_with_content(generate: Callable[[Writer], None]) -> StreamReader:
  """Return a reader of whatever ``generate`` writes to its writer."""
  return StreamReader(seq_with_content(generate))
