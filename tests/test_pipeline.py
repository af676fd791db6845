"""Tests for the Pipeline class."""

import base64
import gzip
import io

import pytest

from chunkseq import GeneratorSeq
from chunkseq import Pipeline
from chunkseq import PushSeq
from chunkseq import StreamReader
from chunkseq import seq_from_iterable
from chunkseq import transform_seq


class TestPipelineBasics:
  """Test core pipeline functionality."""

  def test_iterable_source(self):
    """Test creating pipeline from an iterable of chunks."""
    assert Pipeline([b"foo", b"bar"]).to_bytes() == b"foobar"

  def test_bytes_source(self):
    """Test that a bytes object is a single chunk, not an iterable of ints."""
    assert Pipeline(b"hello").first(5) == [b"hello"]

  def test_seq_source(self):
    """Test that a sequence is used as-is."""
    seq = seq_from_iterable([b"a", b"b"])
    assert Pipeline(seq).seq is seq

  def test_reader_source(self):
    """Test creating pipeline from a byte source."""
    assert Pipeline(io.BytesIO(b"0123456789"), buffer_size=4).first(3) == [b"0123", b"4567", b"89"]

  def test_transfer_source(self, chunked_source):
    """Test that a source with write_to becomes a push sequence."""
    assert isinstance(Pipeline(chunked_source(b"abc")).seq, PushSeq)

  def test_pipeline_iteration(self):
    """Test pipeline is iterable."""
    assert [bytes(c) for c in Pipeline([b"1", b"2", b"3"])] == [b"1", b"2", b"3"]

  def test_iterator_consumption(self):
    """Test that a pipeline over an iterator is consumed by the first run."""
    pipeline = Pipeline(iter([b"a", b"b"]))
    assert pipeline.to_bytes() == b"ab"
    assert pipeline.to_bytes() == b""

  def test_none_source(self):
    """Test that a missing source is rejected."""
    with pytest.raises(ValueError):
      Pipeline(None)

  def test_unsupported_source(self):
    """Test that a source of the wrong type is rejected."""
    with pytest.raises(TypeError):
      Pipeline(42)


class TestPipelineTransformations:
  """Test pipeline transformation methods."""

  def test_through(self, base64_writer):
    """Test piping the pipeline through a write algorithm."""
    assert Pipeline([b"hello, ", b"world\n"]).through(base64_writer).to_bytes() == b"aGVsbG8sIHdvcmxkCg=="

  def test_chained_through(self, base64_writer):
    """Test that transforms apply in the order they are added."""
    data = b"payload " * 200
    encoded = (
      Pipeline([data])
      .through(lambda w: gzip.GzipFile(fileobj=w, mode="wb"))
      .through(base64_writer)
      .to_bytes()
    )
    assert gzip.decompress(base64.b64decode(encoded)) == data

  def test_apply_with_transform_seq(self):
    """Test apply with a sequence-to-sequence function."""
    compress = transform_seq(lambda w: gzip.GzipFile(fileobj=w, mode="wb"))
    assert gzip.decompress(Pipeline([b"abc"]).apply(compress).to_bytes()) == b"abc"

  def test_apply_with_generator_function(self):
    """Test apply with a function building a new sequence."""

    def upper(seq):
      def produce():
        for chunk in seq:
          yield bytes(chunk).upper()

      return GeneratorSeq(produce)

    assert Pipeline([b"abc", b"def"]).apply(upper).to_bytes() == b"ABCDEF"

  def test_apply_must_return_seq(self):
    """Test that apply rejects functions that do not return a sequence."""
    with pytest.raises(TypeError):
      Pipeline([b"abc"]).apply(lambda seq: [b"abc"])


class TestPipelineTerminalOperations:
  """Test operations that run the pipeline."""

  def test_to_reader(self):
    """Test reading the pipeline's output."""
    reader = Pipeline([b"foo", b"bar"]).to_reader()
    assert isinstance(reader, StreamReader)
    with reader:
      assert reader.read(2) == b"fo"
      assert reader.read() == b"obar"

  def test_copy_to(self):
    """Test writing the pipeline's output into a writer."""
    out = io.BytesIO()
    assert Pipeline([b"foo", b"bar"]).copy_to(out) == 6
    assert out.getvalue() == b"foobar"

  def test_to_bytes_raises_error(self):
    """Test that a failing pipeline raises its error."""

    def produce():
      yield b"a"
      raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
      Pipeline(GeneratorSeq(produce)).to_bytes()

  def test_first_stops_producer(self):
    """Test that first stops the producer after n chunks."""
    produced = []

    def produce():
      for i in range(100):
        produced.append(i)
        yield bytes([i])

    assert Pipeline(GeneratorSeq(produce)).first(3) == [b"\x00", b"\x01", b"\x02"]
    assert produced == [0, 1, 2]

  def test_first_returns_copies(self):
    """Test that first returns chunks that survive buffer reuse."""
    assert Pipeline(io.BytesIO(b"aaabbb"), buffer_size=3).first(2) == [b"aaa", b"bbb"]

  def test_first_validates_n(self):
    """Test that first requires a positive count."""
    with pytest.raises(AssertionError):
      Pipeline([b"a"]).first(0)
