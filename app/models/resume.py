from sqlalchemy import Column, String, DateTime, JSON
import uuid

from app.db.session import Base, utcnow


def generate_uuid():
    return str(uuid.uuid4())


class Resume(Base):
    __tablename__ = "resumes"

    id = Column(String, primary_key=True, default=generate_uuid)
    userId = Column(String, index=True, nullable=False)
    objectKey = Column(String, nullable=False)
    originalFilename = Column(String, nullable=True)
    # Filled in by parsing
    parsedSkills = Column(JSON, nullable=True)
    parsedProjects = Column(JSON, nullable=True)
    recommendedRoles = Column(JSON, nullable=True)
    # Filled in by role selection
    selectedRole = Column(String, nullable=True)
    uploadedAt = Column(DateTime, default=utcnow)
