"""Structuring oracle interface."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class StructuringOracle(Protocol):
    """External provider turning free text into a best-effort CV draft candidate.

    The candidate may be incomplete or violate the schema; callers must run
    it through the schema validator before trusting it.
    """

    name: str

    async def propose(self, text: str, schema: dict[str, object]) -> dict[str, object]:
        """Return a candidate JSON object for the given text."""
        ...
