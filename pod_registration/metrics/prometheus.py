from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

metrics_router = APIRouter()

REGISTRATIONS_ACCEPTED = Counter("pod_registrations_accepted_total", "Registrations accepted by the Pod")
# reason: missing_fields | malformed | internal
REGISTRATIONS_REJECTED = Counter(
    "pod_registrations_rejected_total", "Registrations refused by the Pod", ["reason"]
)


@metrics_router.get("/metrics")
async def metrics():
    """Prometheus exposition endpoint for process and registration metrics."""
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
