from pydantic import BaseModel
from typing import Optional
from ims.modules.setup.wizard import SetupStep, StepStatus


class SetupStepResponse(BaseModel):
    id: str
    title: str
    description: str
    status: StepStatus
    has_probe: bool
    manual_instructions: Optional[str] = None
    sql: Optional[str] = None

    @classmethod
    def from_step(cls, step: SetupStep) -> "SetupStepResponse":
        return cls(**step.model_dump(), has_probe=step.has_probe)


class SetupCheckResponse(BaseModel):
    completed_count: int
    total_count: int
    current_step: Optional[SetupStepResponse] = None
    all_completed: bool
    progress: int


class StepTestResponse(BaseModel):
    step_id: str
    passed: bool
    status: StepStatus


class ProgressResponse(BaseModel):
    progress: int
