import asyncio
import sys
import typing as t

import pydantic as p

import assessor.lib.cli as click
import assessor.lib.json as json
from assessor.core import di
from assessor.llm.evaluation import EvaluationPipeline, split_assessment_ids
from assessor.web.assessor.view import EvaluateRequest


@click.command()
@click.argument("submission", type=click.File("r", encoding="utf8"))
@click.option("--indent", type=click.IntRange(min=0), default=2, show_default=True)
@di.inject
def evaluate(
    submission: t.TextIO,
    indent: int,
    pipeline: EvaluationPipeline = di.Provide["evaluation"],
):
    """Score a submission file (or - for stdin) and print the evaluation without storing it.

    The file holds the JSON body accepted by POST /api/evaluate.
    """
    try:
        request = EvaluateRequest.model_validate_json(submission.read())
    except p.ValidationError as e:
        raise click.ClickException(f"invalid submission: {e}") from e
    if not request.is_complete:
        raise click.ClickException("submission needs assessment_id, student_id and student_answers")

    assert request.assessment_id is not None and request.student_answers is not None
    assessment_ids = split_assessment_ids(request.assessment_id)
    if not assessment_ids:
        raise click.ClickException("submission needs assessment_id, student_id and student_answers")

    result = asyncio.run(pipeline.evaluate(assessment_ids, request.questions, request.student_answers))
    click.echo(json.dumps(result, indent=indent or None, ensure_ascii=False), file=sys.stdout)
