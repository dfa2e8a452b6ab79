from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/health", response_class=PlainTextResponse)
def health() -> str:
    """Liveness probe used by Cloud Run and Kubernetes."""
    return "UP"


@router.get("/healthcheck", description="simple healthcheck endpoint")
def healthcheck() -> dict:
    """
    Does nothing but return 200 response code

    Returns:
        dict: empty JSON object
    """
    return {}
