"""Job posting REST API.

Base URL: /job-postings
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from ..models import JobPostingCreate
from ..services.applications import JobPostingService
from .deps import get_job_posting_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/job-postings", tags=["Job Postings"])

JobPostings = Annotated[JobPostingService, Depends(get_job_posting_service)]


@router.post("", status_code=201)
async def create_job_posting(body: JobPostingCreate, postings: JobPostings) -> dict:
    posting = await postings.create(body)
    return {
        "message": "Job posting created successfully.",
        "jobPostingId": posting.job_posting_id,
    }


@router.get("")
async def list_job_postings(postings: JobPostings) -> list[dict]:
    return [posting.to_wire() for posting in await postings.list_all()]


# Registered before /{job_posting_id} so "ids" is not parsed as an id
@router.get("/ids")
async def list_job_posting_ids(postings: JobPostings) -> list[int]:
    return await postings.list_ids()


@router.get("/{job_posting_id}")
async def get_job_posting(job_posting_id: int, postings: JobPostings) -> dict:
    posting = await postings.get(job_posting_id)
    if posting is None:
        raise HTTPException(status_code=404, detail=f"Job posting {job_posting_id} not found")
    return posting.to_wire()
