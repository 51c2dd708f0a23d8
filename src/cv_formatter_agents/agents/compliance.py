"""Compliance agent: score the final draft and derive its file name."""

from __future__ import annotations

import time

from cv_formatter_agents.agents.base import BaseAgent
from cv_formatter_agents.rules.filename import derive_filename
from cv_formatter_core.exceptions import CvFormatterError
from cv_formatter_core.state import PipelineState


class ComplianceAgent(BaseAgent):
    """Produce the compliance report and EHS file name."""

    agent_name = "compliance"

    async def run(self, state: PipelineState) -> PipelineState:
        """Populate state.compliance and state.filename."""
        if state.draft is None:
            msg = "Compliance check requires a merged draft"
            raise CvFormatterError(msg)

        self._log_start()
        start = time.monotonic()

        state.compliance = self.toolkit.engine.check_compliance(state.draft)
        state.filename = derive_filename(
            state.draft,
            candidate_id=state.request.candidate_id or self.settings.default_candidate_id,
            client_label=state.request.client_label or self.settings.default_client_label,
        )

        self._log_end(
            time.monotonic() - start,
            {
                "compliant": state.compliance.compliant,
                "score": state.compliance.score,
                "issues": len(state.compliance.issues),
                "filename": state.filename,
            },
        )
        return state
