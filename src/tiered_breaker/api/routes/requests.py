"""Service request endpoint.

Endpoints:
- POST /requests - Serve a request at the current tier and record the outcome
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from tiered_breaker.api.dependencies import get_workflow_dep
from tiered_breaker.api.models import ServiceRequestBody, ServiceResponseModel
from tiered_breaker.models import ServiceRequest
from tiered_breaker.workflow import RequestWorkflow

router = APIRouter()


@router.post(
    "",
    response_model=ServiceResponseModel,
    responses={
        500: {"model": ServiceResponseModel, "description": "Full capacity handler failed"},
        503: {"model": ServiceResponseModel, "description": "System under maintenance"},
    },
)
async def submit_request(
    body: ServiceRequestBody | None = None,
    workflow: RequestWorkflow = Depends(get_workflow_dep),
) -> JSONResponse:
    """Serve a request through the breaker.

    The body is optional; a missing error flag means no failure is requested.
    The HTTP status is the outcome status (200, 500 or 503).

    Args:
        body: Optional request body.
        workflow: Request workflow (injected).

    Returns:
        The outcome with the breaker transition it caused.
    """
    request = ServiceRequest.from_payload(body.model_dump() if body else None)
    response = await workflow.handle(request)
    return JSONResponse(status_code=response.status, content=response.to_dict())
