from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Iterable


class BaseInput(ABC):
    """
    Abstract base for sources of raw fixed-width lines.

    :param source: Path of the file holding the records.
    :type source: str
    :param opts: Reader options; ``encoding`` selects the text encoding.
    :type opts: Any
    """
    def __init__(self, source: str, **opts: Any):
        self.source = source
        self.opts = opts

    @property
    def encoding(self) -> str:
        return self.opts.get("encoding") or "utf-8"

    @abstractmethod
    def iter_lines(self) -> Iterable[str]:
        """
        Yield record lines in source order, terminators removed.

        :rtype: Iterable[str]
        """
