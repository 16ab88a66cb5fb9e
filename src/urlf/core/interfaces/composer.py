from __future__ import annotations
from typing import Protocol, runtime_checkable

from urlf.core.models import UrlRecord


@runtime_checkable
class UrlComposerProtocol(Protocol):
    """Serializes a structured URL record into its final escaped string."""

    def compose(self, record: UrlRecord) -> str:
        ...
