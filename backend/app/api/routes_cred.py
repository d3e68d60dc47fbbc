from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from backend.app.api.schemas import (
    CredSummaryResponse,
    NodeCredModel,
    ReanalyzeRequest,
    ReanalyzeResponse,
    StatusResponse,
    WeightsModel,
)
from backend.app.dependencies import get_cred_service
from backend.app.services.cred_service import CredService

from credgraph.graph.weights import Weights

router = APIRouter()


def _weights(request: ReanalyzeRequest) -> Optional[Weights]:
    if request.weights is None:
        return None
    return Weights.from_dict(request.weights.model_dump())


def _params(request: ReanalyzeRequest) -> Optional[dict]:
    if request.params is None:
        return None
    return request.params.model_dump()


@router.get("/summary", response_model=CredSummaryResponse)
def cred_summary(service: CredService = Depends(get_cred_service)):
    return service.summary()


@router.get("/nodes", response_model=List[NodeCredModel])
def cred_nodes(
    prefix: Optional[List[str]] = Query(default=None),
    limit: Optional[int] = Query(default=None, ge=1),
    service: CredService = Depends(get_cred_service),
):
    return [
        NodeCredModel(
            address=list(c.address),
            description=c.description,
            cred=list(c.cred),
            total=c.total,
        )
        for c in service.nodes(prefix, limit)
    ]


@router.get("/weights", response_model=WeightsModel)
def cred_weights(service: CredService = Depends(get_cred_service)):
    return service.weights().to_dict()


@router.post("/status", response_model=StatusResponse)
def cred_status(
    request: ReanalyzeRequest,
    service: CredService = Depends(get_cred_service),
):
    return service.status(_weights(request), _params(request))


@router.post("/reanalyze", response_model=ReanalyzeResponse)
def cred_reanalyze(
    request: ReanalyzeRequest,
    service: CredService = Depends(get_cred_service),
):
    return service.reanalyze(_weights(request), _params(request))
