"""
LineInput: Reads a fixed-width text file and yields its raw record lines.

Lines are decoded with the configured encoding (undecodable bytes are
replaced), have their ``\\r\\n`` terminator removed, and are yielded lazily in
file order. Blank lines are passed through; callers decide whether to skip
them.

:class LineInput: Input class for fixed-width files.
:method iter_lines: Yields raw lines.
"""
from typing import Iterator

from .base import BaseInput


class LineInput(BaseInput):
    """
    Input class for fixed-width record files.

    :param source: Path of the file to read.
    :param encoding: Character encoding, ``utf-8`` by default.
    """

    def iter_lines(self) -> Iterator[str]:
        """
        Iterate over the file and yield each line without its terminator.

        :return: Yields raw record strings.
        :rtype: Iterator[str]
        """
        with open(self.source, "rb") as fh:
            for raw in fh:
                yield raw.decode(self.encoding, errors="replace").rstrip("\r\n")
