"""Route aggregation for the evaluation API."""

__all__ = [
    "router",
]

from fastapi import APIRouter

from . import evaluation

router = APIRouter()
router.include_router(evaluation.router)
