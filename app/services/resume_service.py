import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.agents.content_generator import ContentGenerator, ResumeExtraction
from app.core.exceptions import InvalidInputError, NotFoundError, UpstreamServiceError
from app.crud import crud_resume
from app.models.resume import Resume
from app.tools.file_uploader import LocalObjectStorage, StoredObject

logger = logging.getLogger(__name__)


def get_resume_or_raise(db: Session, resume_id: str) -> Resume:
    resume = crud_resume.get_resume(db, resume_id)
    if resume is None:
        raise NotFoundError(f"Resume not found: {resume_id}")
    return resume


def list_resumes(db: Session, user_id: str, skip: int = 0, limit: int = 100) -> List[Resume]:
    return crud_resume.get_resumes(db, user_id, skip=skip, limit=limit)


def upload_resume(
    db: Session,
    storage: LocalObjectStorage,
    user_id: str,
    content: bytes,
    filename: Optional[str],
) -> Tuple[Resume, StoredObject]:
    """Put the file in object storage and record its metadata."""
    if not content:
        raise InvalidInputError("No file uploaded")

    try:
        stored = storage.put(content, filename or "resume")
    except OSError as e:
        logger.exception("Storing resume failed")
        raise UpstreamServiceError("Failed to store resume") from e

    record = crud_resume.save_resume_metadata(db, user_id, stored.key, filename)
    logger.info(f"[Upload] Resume {record.id} stored at {stored.key}")
    return record, stored


def parse_resume(
    db: Session,
    storage: LocalObjectStorage,
    generator: ContentGenerator,
    resume_id: str,
) -> ResumeExtraction:
    """Run extraction on the stored file and persist skills, projects and roles."""
    resume = get_resume_or_raise(db, resume_id)
    file_path = storage.path_for(resume.objectKey)
    if not file_path.exists():
        raise NotFoundError(f"Stored file missing for resume {resume_id}")

    try:
        extracted = generator.parse_resume(str(file_path))
    except Exception as e:
        logger.exception(f"Parsing failed for resume {resume_id}")
        raise UpstreamServiceError("Failed to parse resume") from e

    crud_resume.update_parsed_data(
        db,
        resume,
        extracted.skills,
        extracted.projects,
        extracted.recommended_roles,
    )
    return extracted


def select_role(db: Session, resume_id: Optional[str], role: Optional[str]) -> Resume:
    if not resume_id or not role:
        raise InvalidInputError("Missing resumeId or role")
    resume = get_resume_or_raise(db, resume_id)
    return crud_resume.update_selected_role(db, resume, role)
