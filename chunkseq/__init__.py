"""chunkseq - Adapters between pull-style byte chunk sequences and push-style writers.

This library converts between lazily produced sequences of byte chunks and
the readers and writers that most transfer and encoding code is written
against, on a single thread and without copying where it can be avoided.
"""

from chunkseq.adapters.http import fetch
from chunkseq.adapters.http import seq_from_response
from chunkseq.adapters.http import upload
from chunkseq.adapters.reader import seq_from_reader
from chunkseq.adapters.stream import StreamReader
from chunkseq.adapters.stream import reader_from_seq
from chunkseq.adapters.transform import pipe_seq_through
from chunkseq.adapters.transform import pipe_through
from chunkseq.adapters.transform import reader_with_content
from chunkseq.adapters.transform import seq_with_content
from chunkseq.adapters.transform import transform_seq
from chunkseq.errors import ChunkSeqError
from chunkseq.errors import SequenceTerminated
from chunkseq.errors import ShortWriteError
from chunkseq.pipeline import Pipeline
from chunkseq.sequence import GeneratorSeq
from chunkseq.sequence import PushSeq
from chunkseq.sequence import copy_seq
from chunkseq.sequence import empty_seq
from chunkseq.sequence import seq_from_iterable
from chunkseq.sequence import sequence
from chunkseq.sink import ActiveFlag
from chunkseq.sink import SequenceSink
from chunkseq.types import DEFAULT_BUFFER_SIZE
from chunkseq.types import Seq

__all__ = [
  "Seq",
  "GeneratorSeq",
  "PushSeq",
  "sequence",
  "seq_from_iterable",
  "empty_seq",
  "copy_seq",
  "ActiveFlag",
  "SequenceSink",
  "seq_from_reader",
  "StreamReader",
  "reader_from_seq",
  "pipe_seq_through",
  "pipe_through",
  "transform_seq",
  "seq_with_content",
  "reader_with_content",
  "Pipeline",
  "seq_from_response",
  "fetch",
  "upload",
  "ChunkSeqError",
  "SequenceTerminated",
  "ShortWriteError",
  "DEFAULT_BUFFER_SIZE",
]
