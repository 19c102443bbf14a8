from fastapi import APIRouter, Depends, HTTPException
from ims.database.supabase_client import get_supabase
from ims.core.dependencies import get_setup_wizard
from ims.modules.setup.connection import ConnectionReport, ConnectionTester
from ims.modules.setup.schemas import (
    SetupStepResponse, SetupCheckResponse, StepTestResponse, ProgressResponse
)
from ims.modules.setup.wizard import SetupWizard, SetupSummary
from supabase import Client
from typing import List

router = APIRouter(prefix="/setup", tags=["setup"])


def _get_step_or_404(wizard: SetupWizard, step_id: str):
    step = wizard.get_step(step_id)
    if step is None:
        raise HTTPException(status_code=404, detail="Setup step not found")
    return step


@router.get("/steps", response_model=List[SetupStepResponse])
async def list_steps(wizard: SetupWizard = Depends(get_setup_wizard)):
    """List setup steps in order"""
    return [SetupStepResponse.from_step(step) for step in wizard.get_steps()]


@router.get("/steps/{step_id}", response_model=SetupStepResponse)
async def get_step(step_id: str, wizard: SetupWizard = Depends(get_setup_wizard)):
    return SetupStepResponse.from_step(_get_step_or_404(wizard, step_id))


@router.post("/steps/{step_id}/test", response_model=StepTestResponse)
async def test_step(step_id: str, wizard: SetupWizard = Depends(get_setup_wizard)):
    """Run the probe of a step. Steps without a probe report passed=false."""
    _get_step_or_404(wizard, step_id)
    passed = await wizard.test_step(step_id)
    return StepTestResponse(
        step_id=step_id,
        passed=passed,
        status=wizard.get_step(step_id).status
    )


@router.post("/steps/{step_id}/complete", response_model=SetupStepResponse)
async def complete_step(step_id: str, wizard: SetupWizard = Depends(get_setup_wizard)):
    """Mark a step completed after following its manual instructions"""
    _get_step_or_404(wizard, step_id)
    wizard.mark_step_completed(step_id)
    return SetupStepResponse.from_step(wizard.get_step(step_id))


@router.post("/check", response_model=SetupCheckResponse)
async def check_all_steps(wizard: SetupWizard = Depends(get_setup_wizard)):
    """Probe every automatic step in order and report the aggregate"""
    result = await wizard.check_all_steps()
    return SetupCheckResponse(
        completed_count=result.completed_count,
        total_count=result.total_count,
        current_step=SetupStepResponse.from_step(result.current_step) if result.current_step else None,
        all_completed=result.all_completed,
        progress=wizard.get_progress()
    )


@router.post("/reset", response_model=List[SetupStepResponse])
async def reset_steps(wizard: SetupWizard = Depends(get_setup_wizard)):
    wizard.reset()
    return [SetupStepResponse.from_step(step) for step in wizard.get_steps()]


@router.get("/progress", response_model=ProgressResponse)
async def get_progress(wizard: SetupWizard = Depends(get_setup_wizard)):
    return ProgressResponse(progress=wizard.get_progress())


@router.get("/summary", response_model=SetupSummary)
async def get_summary(wizard: SetupWizard = Depends(get_setup_wizard)):
    return wizard.get_summary()


@router.get("/connection", response_model=ConnectionReport)
async def run_connection_tests(supabase: Client = Depends(get_supabase)):
    """Run backend connectivity diagnostics"""
    return await ConnectionTester(supabase).run_all_tests()
