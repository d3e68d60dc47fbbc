from fastapi import APIRouter, Depends

from backend.app.api.schemas import GraphStatsResponse
from backend.app.dependencies import get_cred_service
from backend.app.services.cred_service import CredService

router = APIRouter()


@router.get("/stats", response_model=GraphStatsResponse)
def graph_stats(service: CredService = Depends(get_cred_service)):
    return service.graph_stats()
