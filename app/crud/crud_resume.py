from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.resume import Resume


def get_resumes(db: Session, user_id: str, skip: int = 0, limit: int = 100) -> List[Resume]:
    return (
        db.query(Resume)
        .filter(Resume.userId == user_id)
        .order_by(Resume.uploadedAt.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_resume(db: Session, resume_id: str) -> Optional[Resume]:
    return db.query(Resume).filter(Resume.id == resume_id).first()


def save_resume_metadata(db: Session, user_id: str, object_key: str, original_filename: Optional[str] = None) -> Resume:
    """
    Record a freshly uploaded resume. Parsed fields stay empty until parsing runs.
    """
    db_resume = Resume(userId=user_id, objectKey=object_key, originalFilename=original_filename)

    db.add(db_resume)
    db.commit()
    db.refresh(db_resume)

    return db_resume


def update_parsed_data(
    db: Session,
    resume: Resume,
    skills: List[str],
    projects: List[str],
    recommended_roles: List[str],
) -> Resume:
    resume.parsedSkills = list(skills)
    resume.parsedProjects = list(projects)
    resume.recommendedRoles = list(recommended_roles)
    db.commit()
    db.refresh(resume)
    return resume


def update_selected_role(db: Session, resume: Resume, role: str) -> Resume:
    resume.selectedRole = role
    db.commit()
    db.refresh(resume)
    return resume
