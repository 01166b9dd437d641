# nwi/services/ingest/reader.py
import csv
import logging
from pathlib import Path
from typing import Iterator, List, TextIO, Union

from nwi.core.exceptions import MalformedRecordError

logger = logging.getLogger(__name__)


class CsvRecordReader:
    """
    Lazy, single-pass reader for government CSV extracts.

    The first row is the header; every data row must have the same number of
    fields as the header or MalformedRecordError is raised. Blank lines carry
    no fields and are skipped, not reported as arity mismatches.
    """

    def __init__(self, source: Union[str, Path, TextIO], delimiter: str = ","):
        self._owns_stream = isinstance(source, (str, Path))
        if self._owns_stream:
            self.name = str(source)
            # utf-8-sig: some extracts ship with a BOM
            self._stream = open(source, "r", encoding="utf-8-sig", newline="")
        else:
            self.name = getattr(source, "name", "<stream>")
            self._stream = source
        self._reader = csv.reader(self._stream, delimiter=delimiter)
        self._header = None
        self._consumed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        if self._owns_stream and not self._stream.closed:
            self._stream.close()

    @property
    def header(self) -> List[str]:
        if self._header is None:
            try:
                header = next(self._reader)
            except StopIteration:
                raise MalformedRecordError(f"{self.name}: missing header row") from None
            self._header = [h.strip() for h in header]
        return self._header

    def __iter__(self) -> Iterator[List[str]]:
        if self._consumed:
            raise RuntimeError(f"{self.name} was already read; reopen it to read again")
        self._consumed = True
        arity = len(self.header)
        for row in self._reader:
            if not row:
                continue
            if len(row) != arity:
                raise MalformedRecordError(
                    f"{self.name}: expected {arity} fields, got {len(row)}",
                    line=self._reader.line_num,
                )
            yield row
