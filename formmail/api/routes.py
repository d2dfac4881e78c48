"""HTTP routes for the form endpoints.

Handlers are plain functions so FastAPI runs them on its worker threadpool;
the blocking transport call never stalls the event loop.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from formmail.domain.models import ContactSubmission, JobApplicationSubmission
from formmail.submissions.service import SubmissionService

from .rate_limit import enforce_rate_limit

router = APIRouter()


def get_submission_service(request: Request) -> SubmissionService:
    return request.app.state.submission_service


@router.post("/api/contact", dependencies=[Depends(enforce_rate_limit)])
def submit_contact(
    submission: ContactSubmission,
    service: SubmissionService = Depends(get_submission_service),
) -> JSONResponse:
    result = service.submit_contact(submission)
    return JSONResponse(status_code=result.status_code, content=result.to_response())


@router.post("/api/job-application", dependencies=[Depends(enforce_rate_limit)])
def submit_job_application(
    submission: JobApplicationSubmission,
    service: SubmissionService = Depends(get_submission_service),
) -> JSONResponse:
    result = service.submit_job_application(submission)
    return JSONResponse(status_code=result.status_code, content=result.to_response())


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}
