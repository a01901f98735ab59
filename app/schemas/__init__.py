from .ResumeSchemas import (
	ResumeSchema,
	UploadResumeData,
	ParsedResumeData,
	SelectRoleRequest,
	ResumeUploadResponse,
	ParseResumeResponse,
	ResumeSingleResponse,
	ResumeListResponse,
)
from .InterviewSchemas import (
	RoundSchema,
	CandidateQuestion,
	GeneratedQuestionSchema,
	AnswerSchema,
	SessionSnapshot,
	SubmitAnswerResult,
	StartInterviewRequest,
	SubmitAnswerRequest,
	StartInterviewData,
	StartInterviewResponse,
	SessionStatusResponse,
	GeneratedQuestionListResponse,
	CandidateQuestionListResponse,
	AnswerListResponse,
	SubmitAnswerResponse,
)

__all__ = [
	"ResumeSchema",
	"UploadResumeData",
	"ParsedResumeData",
	"SelectRoleRequest",
	"ResumeUploadResponse",
	"ParseResumeResponse",
	"ResumeSingleResponse",
	"ResumeListResponse",
	"RoundSchema",
	"CandidateQuestion",
	"GeneratedQuestionSchema",
	"AnswerSchema",
	"SessionSnapshot",
	"SubmitAnswerResult",
	"StartInterviewRequest",
	"SubmitAnswerRequest",
	"StartInterviewData",
	"StartInterviewResponse",
	"SessionStatusResponse",
	"GeneratedQuestionListResponse",
	"CandidateQuestionListResponse",
	"AnswerListResponse",
	"SubmitAnswerResponse",
]
