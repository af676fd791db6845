import base64

import pytest


class Base64Writer:
  """A streaming base64 encoder writing its output to another writer."""

  def __init__(self, writer):
    self._writer = writer
    self._pending = b""
    self.closed = False

  def write(self, data):
    n = len(data)
    data = self._pending + bytes(data)
    cut = len(data) - len(data) % 3
    if cut:
      self._writer.write(base64.b64encode(data[:cut]))
    self._pending = data[cut:]
    return n

  def close(self):
    if self.closed:
      return
    self.closed = True
    if self._pending:
      self._writer.write(base64.b64encode(self._pending))


class ChunkedSource:
  """A byte source that transfers itself into a writer in fixed-size pieces."""

  def __init__(self, data: bytes, piece_size: int = 4):
    self.data = data
    self.piece_size = piece_size
    self.errors: list[Exception] = []

  def write_to(self, writer):
    total = 0
    for i in range(0, len(self.data), self.piece_size):
      try:
        total += writer.write(self.data[i : i + self.piece_size])
      except Exception as e:
        self.errors.append(e)
        raise
    return total


@pytest.fixture
def base64_writer():
  return Base64Writer


@pytest.fixture
def chunked_source():
  return ChunkedSource
