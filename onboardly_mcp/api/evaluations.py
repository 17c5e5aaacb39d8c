"""Application evaluation REST API.

Base URL: /evaluations
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from ..models import EvaluationCreate, FinalScoreResponse, MessageResponse
from ..services.applications import ApplicationService, EvaluationService
from ..services.email import EmailService, compose_evaluation_message
from .deps import get_application_service, get_email_service, get_evaluation_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/evaluations", tags=["Evaluations"])

Evaluations = Annotated[EvaluationService, Depends(get_evaluation_service)]


@router.post("/evaluate", response_model=MessageResponse)
async def evaluate(body: EvaluationCreate, evaluations: Evaluations) -> MessageResponse:
    if body.job_application_id <= 0:
        raise HTTPException(
            status_code=400, detail="Valid evaluation and applicant ID are required."
        )
    if not await evaluations.save(body):
        raise HTTPException(status_code=400, detail="Failed to save evaluation.")
    return MessageResponse(message="Evaluation saved successfully.")


@router.get("")
async def list_evaluations(evaluations: Evaluations) -> list[dict]:
    return [evaluation.to_wire() for evaluation in await evaluations.list_all()]


@router.get("/applicant/{applicant_id}/score")
async def get_final_score(applicant_id: int, evaluations: Evaluations) -> dict:
    score = await evaluations.get_final_score(applicant_id)
    if score is None:
        raise HTTPException(status_code=404, detail="Evaluation not found for this applicant")
    return FinalScoreResponse(
        job_application_id=applicant_id, final_average_score=score
    ).model_dump(by_alias=True)


@router.get("/{applicant_id}")
async def get_evaluation(applicant_id: int, evaluations: Evaluations) -> dict:
    evaluation = await evaluations.get_by_applicant(applicant_id)
    if evaluation is None:
        raise HTTPException(status_code=404, detail="Evaluation not found for this applicant")
    return evaluation.to_wire()


@router.post("/mail/{applicant_id}/send-email")
async def send_evaluation_email(
    applicant_id: int,
    evaluations: Evaluations,
    applications: Annotated[ApplicationService, Depends(get_application_service)],
    email: Annotated[EmailService, Depends(get_email_service)],
) -> dict:
    """
    Email the candidate the outcome of their stored evaluation.

    The subject and body are generated from the outcome; a meeting link is
    appended when the score reaches the configured threshold.
    """
    evaluation = await evaluations.get_by_applicant(applicant_id)
    if evaluation is None:
        raise HTTPException(status_code=404, detail="Evaluation not found for this applicant")

    candidate = await applications.get_candidate(applicant_id)
    if candidate is None:
        raise HTTPException(status_code=404, detail=f"Application {applicant_id} not found")

    score = evaluation.final_average_score
    passed = score >= email.resolve_threshold(None)
    subject, body = compose_evaluation_message(candidate, passed)

    result = await email.send_evaluation_result_email(candidate, score, subject, body)
    return result.to_wire()
