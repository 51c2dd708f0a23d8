"""Merger agent: reconcile chunk drafts into the final draft."""

from __future__ import annotations

import time

from cv_formatter_agents.agents.base import BaseAgent
from cv_formatter_agents.tools.merger import merge_chunk_results
from cv_formatter_core.state import PipelineState


class MergerAgent(BaseAgent):
    """Merge per-chunk drafts; a single draft passes through untouched."""

    agent_name = "merger"

    async def run(self, state: PipelineState) -> PipelineState:
        """Populate state.draft."""
        self._log_start({"drafts": len(state.chunk_results)})
        start = time.monotonic()

        state.draft = merge_chunk_results(state.chunk_results)

        self._log_end(
            time.monotonic() - start,
            {
                "experience": len(state.draft.experience),
                "education": len(state.draft.education),
                "skills": len(state.draft.skills),
            },
        )
        return state
