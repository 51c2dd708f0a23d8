"""Base agent with logging and error recording."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from cv_formatter_core.models.run import AgentError
from cv_formatter_core.state import PipelineState

if TYPE_CHECKING:
    from cv_formatter_agents.orchestrator.fallback import ProviderFallbackChain
    from cv_formatter_agents.rules.engine import EHSRuleEngine
    from cv_formatter_agents.tools.document_extractor import DocumentExtractor
    from cv_formatter_core.config.settings import Settings

logger = structlog.get_logger()


@dataclass
class AgentToolkit:
    """Collaborators shared by the agents of one pipeline."""

    extractor: DocumentExtractor
    chain: ProviderFallbackChain
    engine: EHSRuleEngine


class BaseAgent(ABC):
    """Abstract base class for all pipeline agents."""

    agent_name: str = "base"

    def __init__(self, settings: Settings, toolkit: AgentToolkit) -> None:
        """Initialize with settings and the pipeline's toolkit."""
        self.settings = settings
        self.toolkit = toolkit

    @abstractmethod
    async def run(self, state: PipelineState) -> PipelineState:
        """Execute the agent's task. Must be implemented by subclasses."""
        ...

    def _log_start(self, context: dict[str, object] | None = None) -> None:
        """Log agent execution start."""
        logger.info(
            "agent_start",
            agent=self.agent_name,
            **(context or {}),
        )

    def _log_end(
        self, duration: float, context: dict[str, object] | None = None
    ) -> None:
        """Log agent execution end with duration."""
        logger.info(
            "agent_end",
            agent=self.agent_name,
            duration_seconds=round(duration, 2),
            **(context or {}),
        )

    def _record_error(
        self,
        state: PipelineState,
        error: Exception,
        is_fatal: bool = False,
        chunk_index: int | None = None,
    ) -> None:
        """Record an error in the pipeline state."""
        agent_error = AgentError(
            agent_name=self.agent_name,
            error_type=type(error).__name__,
            error_message=str(error),
            chunk_index=chunk_index,
            is_fatal=is_fatal,
        )
        state.errors.append(agent_error)
        logger.error(
            "agent_error",
            agent=self.agent_name,
            error_type=type(error).__name__,
            error=str(error),
            chunk_index=chunk_index,
            is_fatal=is_fatal,
        )
