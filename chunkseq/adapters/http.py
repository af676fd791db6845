"""HTTP bodies as sequences.

Response bodies are read with `requests` streaming downloads, so a sequence
over a response holds at most one chunk of it at a time and closes the
connection as soon as the consumer stops. Request bodies are streamed from a
sequence using chunked transfer encoding.

## Usage Example

```python
import gzip

# Download, compress and upload without holding the whole body in memory.
body = fetch("http://source.example.com/data.csv")
compressed = pipe_seq_through(body, lambda w: gzip.GzipFile(fileobj=w, mode="wb"))
response = upload("http://sink.example.com/upload", compressed)
```
"""

from collections.abc import Iterator
import logging

import requests

from chunkseq.sequence import GeneratorSeq
from chunkseq.types import Chunk
from chunkseq.types import Seq

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 300
DEFAULT_CHUNK_SIZE = 16 * 1024


def seq_from_response(response: requests.Response, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Seq:
  """Return a one-shot sequence over the body of a streamed response.

  The response is closed when the sequence ends, fails, or is stopped.

  Args:
      response: A response obtained with ``stream=True``.
      chunk_size: Maximum size of each chunk read from the connection.

  Returns:
      A sequence of the (decoded) body bytes.
  """
  if chunk_size <= 0:
    raise ValueError(f"chunk_size must be positive, got {chunk_size}")

  def produce() -> Iterator[Chunk]:
    with response:
      yield from response.iter_content(chunk_size=chunk_size)

  return GeneratorSeq(produce)


def fetch(
  url: str,
  session: requests.Session | None = None,
  timeout: float = DEFAULT_TIMEOUT,
  chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Seq:
  """Return a sequence over the body returned by a GET of ``url``.

  The request is only sent when the sequence is run, and is sent again on
  every run. Transport errors and error statuses become the terminal error
  of the sequence.

  Args:
      url: The URL to download.
      session: Session to send the request with. A new session is used if
               None.
      timeout: Request timeout in seconds.
      chunk_size: Maximum size of each chunk read from the connection.

  Returns:
      A sequence of the response body bytes.
  """
  if chunk_size <= 0:
    raise ValueError(f"chunk_size must be positive, got {chunk_size}")

  def produce() -> Iterator[Chunk]:
    client = session or requests.Session()
    try:
      logger.debug("GET %s", url)
      response = client.get(url, stream=True, timeout=timeout)
      with response:
        response.raise_for_status()
        yield from response.iter_content(chunk_size=chunk_size)
    finally:
      if session is None:
        client.close()

  return GeneratorSeq(produce)


def upload(
  url: str,
  seq: Seq,
  session: requests.Session | None = None,
  timeout: float = DEFAULT_TIMEOUT,
  method: str = "POST",
) -> requests.Response:
  """Send a sequence as the body of a request.

  The body is sent with chunked transfer encoding, one sequence chunk at a
  time. A terminal error of the sequence aborts the request and is raised.

  Args:
      url: The URL to send the body to.
      seq: The body.
      session: Session to send the request with. A new session is used if
               None.
      timeout: Request timeout in seconds.
      method: The HTTP method to use.

  Returns:
      The response. Error statuses raise `requests.HTTPError`.
  """

  def body() -> Iterator[bytes]:
    # The transport may keep a chunk after asking for the next one.
    for chunk in seq:
      yield bytes(chunk)

  client = session or requests.Session()
  try:
    logger.debug("%s %s", method, url)
    response = client.request(method, url, data=body(), timeout=timeout)
    response.raise_for_status()
    return response
  finally:
    if session is None:
      client.close()
