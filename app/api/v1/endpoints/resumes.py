import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from app.agents.content_generator import ContentGenerator
from app.api.deps import get_content_generator, get_current_user_id, get_storage
from app.api.errors import to_http_exception
from app.core.exceptions import InterviewBackendError
from app.db.session import get_db
from app.schemas.ResumeSchemas import (
    ParsedResumeData,
    ParseResumeResponse,
    ResumeListResponse,
    ResumeSchema,
    ResumeSingleResponse,
    ResumeUploadResponse,
    SelectRoleRequest,
    UploadResumeData,
)
from app.services import resume_service
from app.tools.file_uploader import LocalObjectStorage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/upload-resume", response_model=ResumeUploadResponse)
async def upload_resume(
    resume: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: LocalObjectStorage = Depends(get_storage),
    user_id: str = Depends(get_current_user_id),
):
    """
    Upload a résumé file to object storage and record its metadata.
    Parsing is a separate step (POST /parse-resume/{resume_id}).
    """
    if resume is None:
        raise HTTPException(status_code=400, detail="No file uploaded")

    logger.info(f"[Upload] Receiving file: {resume.filename}")
    content = await resume.read()

    try:
        record, stored = await asyncio.to_thread(
            resume_service.upload_resume, db, storage, user_id, content, resume.filename
        )
    except InterviewBackendError as e:
        raise to_http_exception(e, "Internal Server Error")
    except Exception as e:
        logger.exception(f"Upload error: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")

    return ResumeUploadResponse(
        status=200,
        message="Resume uploaded successfully",
        data=UploadResumeData(resumeId=record.id, url=stored.location),
    )


@router.post("/parse-resume/{resume_id}", response_model=ParseResumeResponse)
def parse_resume(
    resume_id: str,
    db: Session = Depends(get_db),
    storage: LocalObjectStorage = Depends(get_storage),
    generator: ContentGenerator = Depends(get_content_generator),
):
    """Extract skills, projects and recommended roles from an uploaded résumé."""
    try:
        extracted = resume_service.parse_resume(db, storage, generator, resume_id)
    except InterviewBackendError as e:
        raise to_http_exception(e, "Failed to parse resume")
    except Exception as e:
        logger.exception(f"Parsing error: {e}")
        raise HTTPException(status_code=500, detail="Failed to parse resume")

    return ParseResumeResponse(
        status=200,
        message="Parsing successful",
        data=ParsedResumeData(**extracted.model_dump()),
    )


@router.post("/select-role", response_model=ResumeSingleResponse)
def select_role(request: SelectRoleRequest, db: Session = Depends(get_db)):
    try:
        resume = resume_service.select_role(db, request.resumeId, request.role)
    except InterviewBackendError as e:
        raise to_http_exception(e, "Internal Server Error")
    except Exception as e:
        logger.exception(f"Role selection error: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")

    return ResumeSingleResponse(status=200, message="Role saved successfully", data=ResumeSchema.from_model(resume))


@router.get("/resumes", response_model=ResumeListResponse)
def read_resumes(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    resumes = resume_service.list_resumes(db, user_id, skip=skip, limit=limit)
    return {
        "status": 200,
        "message": "Resumes returned successfully",
        "data": [ResumeSchema.from_model(r) for r in resumes],
    }


@router.get("/resumes/{resume_id}", response_model=ResumeSingleResponse)
def read_resume(resume_id: str, db: Session = Depends(get_db)):
    try:
        resume = resume_service.get_resume_or_raise(db, resume_id)
    except InterviewBackendError as e:
        raise to_http_exception(e, "Failed to fetch resume")

    return {"status": 200, "message": "Resume returned successfully", "data": ResumeSchema.from_model(resume)}
