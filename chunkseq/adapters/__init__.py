"""
Adapters between sequences and push-style byte sources and sinks.

- `reader`: demand-driven byte sources as sequences
- `stream`: sequences as demand-driven readers
- `transform`: sequences piped through write algorithms
- `http`: HTTP response and request bodies as sequences
"""

from .reader import seq_from_reader
from .stream import StreamReader
from .stream import reader_from_seq
from .transform import pipe_seq_through
from .transform import pipe_through
from .transform import reader_with_content
from .transform import seq_with_content
from .transform import transform_seq

__all__ = [
  "seq_from_reader",
  "StreamReader",
  "reader_from_seq",
  "pipe_seq_through",
  "pipe_through",
  "transform_seq",
  "seq_with_content",
  "reader_with_content",
]
