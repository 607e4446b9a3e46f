from fastapi import APIRouter, Depends
from fastapi.responses import Response

from deps.auth import get_current_admin
from services.metrics import render_prometheus
from storage import Admin

router = APIRouter(tags=["metrics"])


@router.get("/metrics")
def metrics(admin: Admin = Depends(get_current_admin)):
    body = render_prometheus()
    return Response(content=body, media_type="text/plain; version=0.0.4")
