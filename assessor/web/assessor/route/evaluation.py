"""Evaluation API routes."""

from __future__ import annotations

import logging

import sqlalchemy.exc
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from assessor.core import di
from assessor.lib.json import FastAPIJSONResponse
from assessor.llm.evaluation import EvaluationPipeline, split_assessment_ids
from assessor.model import EvaluationID
from assessor.storage import evaluation as eval_storage

from ..view import ErrorResponse, EvaluateRequest, EvaluationListResponse, EvaluationResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["evaluations"])


def error_response(status_code: int, error: str, details: str | None = None) -> FastAPIJSONResponse:
    return FastAPIJSONResponse(
        ErrorResponse(error=error, details=details).model_dump(exclude_none=True), status_code=status_code
    )


@router.post(
    "/evaluate",
    operation_id="evaluate",
    response_model=EvaluationResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
@di.inject
async def evaluate(
    request: EvaluateRequest,
    session: Session = Depends(di.Manage["storage.persistent.session"]),
    pipeline: EvaluationPipeline = Depends(di.Provide["evaluation"]),
) -> EvaluationResponse | FastAPIJSONResponse:
    """Score a submission, store the result and return it.

    `assessment_id` may list several assessments separated by commas; the
    first is recorded as the evaluation's assessment.
    """
    if not request.is_complete:
        return error_response(status.HTTP_400_BAD_REQUEST, "Missing required fields")

    assert request.assessment_id is not None and request.student_id is not None
    assert request.student_answers is not None
    assessment_ids = split_assessment_ids(request.assessment_id)
    if not assessment_ids:
        return error_response(status.HTTP_400_BAD_REQUEST, "Missing required fields")

    try:
        result = await pipeline.evaluate(
            assessment_ids=assessment_ids,
            questions=request.questions,
            student_answers=request.student_answers,
        )

        try:
            with session.begin():
                evaluation = eval_storage.create(
                    assessment_id=assessment_ids[0],
                    student_id=request.student_id,
                    student_answers=request.student_answers,
                    score=result["score"],
                    performance=result["performance"].value,
                    detailed_feedback=result["detailed_feedback"],
                    recommendations=result["recommendations"],
                    metadata=result["metadata"],
                    session=session,
                )
        except sqlalchemy.exc.SQLAlchemyError as e:
            logger.exception("failed to store evaluation", extra={"student_id": request.student_id})
            return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to store evaluation", str(e))

        return EvaluationResponse.model_validate({
            **evaluation.model_dump(),
            "individual_evaluations": result["individual_evaluations"],
            "all_assessment_ids": result["assessment_ids"],
        })
    except Exception as e:
        logger.exception("evaluation failed")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", str(e))


@router.get("/evaluations", operation_id="list_evaluations")
@di.inject
def list_evaluations(
    student_id: str | None = None,
    assessment_id: str | None = None,
    session: Session = Depends(di.Manage["storage.persistent.session"]),
) -> EvaluationListResponse:
    """List stored evaluations, newest first."""
    with session.begin():
        evaluations = eval_storage.find(student_id=student_id, assessment_id=assessment_id, session=session)
    return EvaluationListResponse(evaluations=list(evaluations), total=len(evaluations))


@router.get("/evaluations/{evaluation_id}", operation_id="get_evaluation")
@di.inject
def get_evaluation(
    evaluation_id: str,
    session: Session = Depends(di.Manage["storage.persistent.session"]),
) -> EvaluationResponse:
    """Get one stored evaluation with its per-assessment breakdown."""
    try:
        eid = EvaluationID(evaluation_id)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Evaluation not found") from None

    with session.begin():
        evaluation = eval_storage.get(eid, session=session)
    if evaluation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Evaluation not found")

    return EvaluationResponse.model_validate({
        **evaluation.model_dump(),
        "individual_evaluations": evaluation.metadata.individual_scores,
        "all_assessment_ids": evaluation.metadata.assessment_ids,
    })
