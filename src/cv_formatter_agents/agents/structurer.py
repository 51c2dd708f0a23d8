"""Structurer agent: text to validated drafts, chunk by chunk when oversized."""

from __future__ import annotations

import asyncio
import time

import structlog

from cv_formatter_agents.agents.base import BaseAgent
from cv_formatter_agents.observability import chunk_log_context
from cv_formatter_agents.orchestrator.fallback import ProviderFallbackChain
from cv_formatter_agents.tools.chunker import chunk_text
from cv_formatter_core.exceptions import (
    AllProvidersFailedError,
    NoViableChunksError,
    StructuringFailedError,
)
from cv_formatter_core.models.document import TextChunk
from cv_formatter_core.models.run import ChunkResult
from cv_formatter_core.state import PipelineState

logger = structlog.get_logger()


class StructurerAgent(BaseAgent):
    """Send text through the provider fallback chain.

    Texts above the chunking threshold are split and structured concurrently,
    at most ``max_concurrent_oracle_calls`` at a time.
    """

    agent_name = "structurer"

    async def run(self, state: PipelineState) -> PipelineState:
        """Populate state.chunks and state.chunk_results."""
        if state.extracted is None:
            msg = "Structuring requires extracted text"
            raise StructuringFailedError(msg)

        text = state.extracted.text
        if not text.strip():
            msg = "Document contains no extractable text"
            raise StructuringFailedError(msg)

        state.chunks = self._split(text)
        self._log_start({"chars": len(text), "chunks": len(state.chunks)})
        start = time.monotonic()

        chain = self.toolkit.chain
        if len(state.chunks) == 1:
            chunk = state.chunks[0]
            structured = await chain.structure(chunk.text)
            state.chunk_results = [
                ChunkResult(chunk=chunk, draft=structured.draft, provider=structured.provider)
            ]
        else:
            state.chunk_results = await self._structure_chunks(chain, state)

        self._log_end(
            time.monotonic() - start,
            {
                "structured_chunks": len(state.chunk_results),
                "failed_chunks": state.failed_chunks,
            },
        )
        return state

    def _split(self, text: str) -> list[TextChunk]:
        """One chunk for normal texts, overlapping windows for oversized ones."""
        if len(text) <= self.settings.chunking_threshold_chars:
            return [TextChunk(index=0, text=text, start_offset=0)]
        return list(
            chunk_text(
                text,
                target_size=self.settings.chunk_size_chars,
                overlap=self.settings.chunk_overlap_chars,
            )
        )

    async def _structure_chunks(
        self, chain: ProviderFallbackChain, state: PipelineState
    ) -> list[ChunkResult]:
        """Structure every chunk concurrently; reassemble in document order.

        A chunk whose providers are exhausted is recorded and skipped; the
        step fails only when no chunk succeeded.
        """
        semaphore = asyncio.Semaphore(self.settings.max_concurrent_oracle_calls)

        async def _one(chunk: TextChunk) -> ChunkResult | None:
            with chunk_log_context(chunk.index):
                async with semaphore:
                    try:
                        structured = await chain.structure(chunk.text, chunk_index=chunk.index)
                    except AllProvidersFailedError as e:
                        self._record_error(state, e, chunk_index=chunk.index)
                        return None
                logger.info("chunk_structured", provider=structured.provider)
            return ChunkResult(chunk=chunk, draft=structured.draft, provider=structured.provider)

        try:
            async with asyncio.TaskGroup() as tg:
                tasks = [tg.create_task(_one(chunk)) for chunk in state.chunks]
        except ExceptionGroup as eg:
            # Surface the first real failure (cost ceiling, bug) unwrapped
            raise eg.exceptions[0] from eg

        results = [r for t in tasks if (r := t.result()) is not None]
        if not results:
            msg = f"None of the {len(state.chunks)} chunks could be structured"
            raise NoViableChunksError(msg)
        return sorted(results, key=lambda r: r.chunk.start_offset)
