"""Reads JSON Lines sample files.

Each non-blank line holds one JSON value. A line that does not decode is
reported as a `SampleDecodeError` in the stream instead of aborting the
read, so the caller can skip it and carry on.
"""

import json
from typing import Any, Iterator, List


class SampleDecodeError(ValueError):
    """A sample line that could not be decoded."""

    def __init__(self, source: str, line: int, column: int, message: str):
        super().__init__(f"{source}:{line}:{column}: {message}")
        self.source = source
        self.line = line
        self.column = column
        self.message = message

    def __reduce__(self):
        return (SampleDecodeError, (self.source, self.line, self.column, self.message))


def decode_sample(text: str | bytes, source: str = '<string>', line: int = 1) -> Any:
    """Decodes one sample line.

    Byte input is decoded as UTF-8 first; a leading byte order mark is ignored.

    Raises:
        SampleDecodeError: if `text` is not valid UTF-8 or not a single JSON value.
    """
    if isinstance(text, bytes):
        try:
            text = text.decode('utf-8-sig')
        except UnicodeDecodeError as e:
            raise SampleDecodeError(source, line, e.start + 1, e.reason) from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise SampleDecodeError(source, line, e.colno, e.msg) from e


def read_samples(file_path: str) -> Iterator[Any]:
    """Yields the decoded value, or a `SampleDecodeError`, for each non-blank line.

    Lines are read as bytes and decoded one at a time, so invalid UTF-8 on
    one line does not affect the others.

    Args:
        file_path: Path of a JSON Lines file
    """
    with open(file_path, 'rb') as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                yield decode_sample(line, file_path, line_number)
            except SampleDecodeError as e:
                yield e


def iter_samples(file_paths: List[str], sample_size: int = 0) -> Iterator[Any]:
    """Chains `read_samples` over several files.

    Stops after `sample_size` successfully decoded values (0 = all). Decode
    errors are passed through and do not count towards the sample size.
    """
    count = 0
    for file_path in file_paths:
        for sample in read_samples(file_path):
            yield sample
            if isinstance(sample, SampleDecodeError):
                continue
            count += 1
            if sample_size > 0 and count >= sample_size:
                return
