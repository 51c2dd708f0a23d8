"""Normalizer agent: apply the EHS rule set to every chunk draft."""

from __future__ import annotations

import time

from cv_formatter_agents.agents.base import BaseAgent
from cv_formatter_core.state import PipelineState


class NormalizerAgent(BaseAgent):
    """Normalize each chunk's draft before the merge."""

    agent_name = "normalizer"

    async def run(self, state: PipelineState) -> PipelineState:
        """Replace every chunk draft with its EHS-normalized version."""
        self._log_start({"drafts": len(state.chunk_results)})
        start = time.monotonic()

        engine = self.toolkit.engine
        state.chunk_results = [
            result.model_copy(update={"draft": engine.normalize(result.draft)})
            for result in state.chunk_results
        ]

        rules = sorted({r for res in state.chunk_results for r in res.draft.audit.rules_applied})
        self._log_end(time.monotonic() - start, {"rules_applied": rules})
        return state
