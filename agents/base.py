"""
Base Agent class and Orchestrator
College Comparison & AI Visibility Parser
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Dict
from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
import time


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AgentResult:
    """Standardized result envelope returned by every agent."""
    agent_name: str
    success: bool
    data: Any = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.started_at and self.finished_at:
            return (self.finished_at - self.started_at).total_seconds()
        return None

    def __repr__(self):
        status = "✅" if self.success else "❌"
        dur = f" ({self.duration_seconds * 1000:.1f}ms)" if self.duration_seconds else ""
        return f"{status} {self.agent_name}{dur}"


class Agent(ABC):
    """
    Abstract base class for all parsing agents.
    Subclasses must implement `run(data)`; it should be a pure function of
    its input and the agent's configuration.

    A logger may be injected; otherwise the agent logs to `agent.<name>`.
    """

    def __init__(self, name: str, logger: Optional[logging.Logger] = None):
        self.name = name
        self.logger = logger or logging.getLogger(f"agent.{name}")

    @abstractmethod
    def run(self, data: Any) -> Any:
        raise NotImplementedError

    def execute(self, data: Any) -> AgentResult:
        """
        Wraps `run()` with timing, structured logging, and error handling.
        Never raises: failures come back as an unsuccessful AgentResult.
        """
        started_at = _now()
        self.logger.debug(f"[{self.name}] Starting...")
        try:
            result = self.run(data)
            finished_at = _now()
            duration = (finished_at - started_at).total_seconds()
            self.logger.debug(f"[{self.name}] Completed in {duration * 1000:.1f}ms")
            return AgentResult(
                agent_name=self.name,
                success=True,
                data=result,
                started_at=started_at,
                finished_at=finished_at,
            )
        except Exception as e:
            finished_at = _now()
            self.logger.error(f"[{self.name}] Failed: {type(e).__name__}: {e}")
            self.logger.debug(f"[{self.name}] Failure detail", exc_info=True)
            return AgentResult(
                agent_name=self.name,
                success=False,
                error=str(e),
                error_type=type(e).__name__,
                started_at=started_at,
                finished_at=finished_at,
            )

    def __repr__(self):
        return f"<Agent: {self.name}>"


class Orchestrator:
    """
    Sequential multi-agent pipeline orchestrator.
    Each agent's output becomes the next agent's input.
    """

    def __init__(
        self,
        agents: List[Agent],
        stop_on_failure: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        self.agents = agents
        self.stop_on_failure = stop_on_failure
        self.logger = logger or logging.getLogger("orchestrator")
        self.run_history: List[AgentResult] = []

    def execute(self, input_data: Any) -> AgentResult:
        """Execute the full pipeline and return the final AgentResult."""
        self.run_history = []
        data = input_data
        total_start = time.perf_counter()

        self.logger.debug(f"🚀 Orchestrator starting — {len(self.agents)} agents in pipeline")

        for i, agent in enumerate(self.agents, 1):
            self.logger.debug(f"  [{i}/{len(self.agents)}] {agent.name}")
            result = agent.execute(data)
            self.run_history.append(result)

            if not result.success:
                self.logger.warning(f"  ❌ '{agent.name}' failed: {result.error}")
                if self.stop_on_failure:
                    return result
            else:
                data = result.data

        elapsed = time.perf_counter() - total_start
        successes = sum(1 for r in self.run_history if r.success)
        self.logger.debug(
            f"✅ Pipeline complete — {successes}/{len(self.agents)} succeeded "
            f"in {elapsed * 1000:.1f}ms"
        )

        for result in reversed(self.run_history):
            if result.success:
                return result
        return self.run_history[-1]

    @property
    def failed_agent(self) -> Optional[str]:
        return next((r.agent_name for r in self.run_history if not r.success), None)

    def summary(self) -> str:
        lines = ["Pipeline Summary:"]
        for r in self.run_history:
            lines.append(f"  {r}")
        return "\n".join(lines)
