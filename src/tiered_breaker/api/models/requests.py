"""API request models with Pydantic validation."""

from pydantic import BaseModel, StrictBool


class ServiceRequestBody(BaseModel):
    """Body of a service request.

    Only the error flag matters to the breaker. Other keys (load scripts
    send a message and a timestamp) are accepted and ignored.
    """

    model_config = {"extra": "ignore"}

    error: StrictBool = False
