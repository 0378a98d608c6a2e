from fastapi import APIRouter, Depends

from dreamers.api.dependencies import get_context
from dreamers.context import AppContext

router = APIRouter(tags=["health"])


@router.get("/health")
def health(context: AppContext = Depends(get_context)):
    return {"status": "ok", "uptime": round(context.uptime(), 3)}
