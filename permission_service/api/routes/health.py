from fastapi import APIRouter, Request, Response, status

from permission_service.schemas.permission import HealthRead
from permission_service.services.health import ServingStatus

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthRead)
def health(request: Request, response: Response):
    """
    Last status reported by the health monitor.
    Anything but SERVING answers 503 so pollers can act on the code alone.
    """
    monitor = getattr(request.app.state, "health_monitor", None)
    current = monitor.status if monitor is not None else ServingStatus.UNKNOWN

    if current != ServingStatus.SERVING:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthRead(status=current)
