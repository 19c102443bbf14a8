import logging
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

Probe = Callable[[], Awaitable[bool]]


class StepStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class SetupStep(BaseModel):
    id: str
    title: str
    description: str
    status: StepStatus = StepStatus.PENDING
    probe: Optional[Probe] = Field(default=None, exclude=True)
    manual_instructions: Optional[str] = None
    sql: Optional[str] = None

    @property
    def has_probe(self) -> bool:
        return self.probe is not None


class SetupCheckResult(BaseModel):
    completed_count: int
    total_count: int
    current_step: Optional[SetupStep] = None
    all_completed: bool


class SetupSummary(BaseModel):
    total_steps: int
    completed_steps: int
    pending_steps: int
    failed_steps: int
    progress: int
    next_action: str


class SetupWizard:
    """
    Tracks the one-time database setup steps in their declared order.

    Each step moves pending -> in_progress -> completed | failed when probed.
    Steps without a probe stay pending until marked completed by hand.
    """

    def __init__(self, steps: List[SetupStep]):
        self._steps = [step.model_copy() for step in steps]

    def _find(self, step_id: str) -> Optional[SetupStep]:
        return next((s for s in self._steps if s.id == step_id), None)

    def get_steps(self) -> List[SetupStep]:
        return [step.model_copy() for step in self._steps]

    def get_step(self, step_id: str) -> Optional[SetupStep]:
        step = self._find(step_id)
        return step.model_copy() if step else None

    def get_current_step(self) -> Optional[SetupStep]:
        """First step that is not completed"""
        step = next((s for s in self._steps if s.status != StepStatus.COMPLETED), None)
        return step.model_copy() if step else None

    async def test_step(self, step_id: str) -> bool:
        step = self._find(step_id)
        if step is None or step.probe is None:
            return False

        step.status = StepStatus.IN_PROGRESS
        try:
            result = await step.probe()
        except Exception as e:
            logger.error(f"Error testing step {step_id}: {e}")
            step.status = StepStatus.FAILED
            return False

        step.status = StepStatus.COMPLETED if result else StepStatus.FAILED
        return bool(result)

    async def check_all_steps(self) -> SetupCheckResult:
        """Probe every step that has a probe, one at a time, in order"""
        completed = 0
        probed = 0
        for step in self._steps:
            if step.probe is None:
                continue
            probed += 1
            if await self.test_step(step.id):
                completed += 1

        logger.info(f"Setup check: {completed}/{probed} automatic checks passed")
        return SetupCheckResult(
            completed_count=completed,
            total_count=len(self._steps),
            current_step=self.get_current_step(),
            all_completed=completed == probed,
        )

    def get_progress(self) -> int:
        if not self._steps:
            return 0
        completed = sum(1 for s in self._steps if s.status == StepStatus.COMPLETED)
        # Half-up rounding
        return int(completed * 100 / len(self._steps) + 0.5)

    def mark_step_completed(self, step_id: str):
        step = self._find(step_id)
        if step is None:
            logger.debug(f"Ignoring completion of unknown setup step: {step_id}")
            return
        step.status = StepStatus.COMPLETED

    def reset(self):
        for step in self._steps:
            step.status = StepStatus.PENDING

    def get_summary(self) -> SetupSummary:
        current_step = self.get_current_step()
        return SetupSummary(
            total_steps=len(self._steps),
            completed_steps=sum(1 for s in self._steps if s.status == StepStatus.COMPLETED),
            pending_steps=sum(1 for s in self._steps if s.status == StepStatus.PENDING),
            failed_steps=sum(1 for s in self._steps if s.status == StepStatus.FAILED),
            progress=self.get_progress(),
            next_action=f"Next: {current_step.title}" if current_step else "Setup completed!",
        )
