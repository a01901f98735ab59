from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class ResumeSchema(BaseModel):
    resumeId: str
    userId: str
    objectKey: str
    originalFilename: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    projects: List[str] = Field(default_factory=list)
    recommendedRoles: List[str] = Field(default_factory=list)
    selectedRole: Optional[str] = None
    uploadedAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, r) -> "ResumeSchema":
        return cls(
            resumeId=r.id,
            userId=r.userId,
            objectKey=r.objectKey,
            originalFilename=r.originalFilename,
            skills=r.parsedSkills or [],
            projects=r.parsedProjects or [],
            recommendedRoles=r.recommendedRoles or [],
            selectedRole=r.selectedRole,
            uploadedAt=r.uploadedAt,
        )


class UploadResumeData(BaseModel):
    resumeId: str
    url: str


class ParsedResumeData(BaseModel):
    skills: List[str] = Field(default_factory=list)
    projects: List[str] = Field(default_factory=list)
    recommended_roles: List[str] = Field(default_factory=list)


class SelectRoleRequest(BaseModel):
    resumeId: Optional[str] = None
    role: Optional[str] = None


class ResumeUploadResponse(BaseModel):
    status: int
    message: str
    data: UploadResumeData


class ParseResumeResponse(BaseModel):
    status: int
    message: str
    data: ParsedResumeData


class ResumeSingleResponse(BaseModel):
    status: int
    message: str
    data: Optional[ResumeSchema] = None


class ResumeListResponse(BaseModel):
    status: int
    message: str
    data: List[ResumeSchema]
