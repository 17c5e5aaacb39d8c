"""Job application REST API.

Base URL: /applications
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from pydantic import EmailStr

from ..services.applications import ApplicationService
from ..services.storage import StorageService
from .deps import get_application_service, get_storage_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/applications", tags=["Applications"])

Applications = Annotated[ApplicationService, Depends(get_application_service)]


@router.post("/apply", status_code=201)
async def apply(
    applications: Applications,
    storage: Annotated[StorageService, Depends(get_storage_service)],
    name: Annotated[str, Form(min_length=1)],
    email: Annotated[EmailStr, Form()],
    position: Annotated[str, Form(min_length=1)],
    job_posting_id: Annotated[int, Form(alias="jobPostingId")],
    resume: Annotated[UploadFile | None, File()] = None,
) -> dict:
    """
    Submit an application with a resume file.

    The resume is uploaded to object storage first; the application row
    stores its public URL.

    Returns:
        Confirmation message and the new application id
    """
    if resume is None:
        raise HTTPException(status_code=400, detail="Resume file is required.")

    data = await resume.read()
    try:
        resume_url = await storage.upload_resume(data, resume.filename or "resume")
    except Exception as e:
        logger.error(f"Resume upload failed for {email}: {e}", exc_info=True)
        raise HTTPException(status_code=502, detail="Resume upload failed.") from e

    application = await applications.save_application(
        name=name,
        email=email,
        position=position,
        resume_url=resume_url,
        job_posting_id=job_posting_id,
    )
    return {
        "message": "Application saved successfully.",
        "jobApplicationId": application.job_application_id,
    }


@router.get("")
async def list_applications(applications: Applications) -> list[dict]:
    return [application.to_wire() for application in await applications.list_applications()]


@router.get("/{application_id}")
async def get_application(application_id: int, applications: Applications) -> dict:
    application = await applications.get_application(application_id)
    if application is None:
        raise HTTPException(status_code=404, detail=f"Application {application_id} not found")
    return application.to_wire()
