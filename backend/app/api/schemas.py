from typing import List, Dict, Any, Optional
from pydantic import BaseModel, Field


class ParamsModel(BaseModel):
    alpha: float
    interval_decay: float


class NodeWeightEntry(BaseModel):
    prefix: List[str]
    weight: float


class EdgeWeightEntry(BaseModel):
    prefix: List[str]
    forward: float = 1.0
    backward: float = 1.0


class WeightsModel(BaseModel):
    node_weights: List[NodeWeightEntry] = Field(default_factory=list)
    edge_weights: List[EdgeWeightEntry] = Field(default_factory=list)


class ReanalyzeRequest(BaseModel):
    weights: Optional[WeightsModel] = None
    params: Optional[ParamsModel] = None


class IntervalModel(BaseModel):
    start_ms: int
    end_ms: int
    start: str


class CredSummaryResponse(BaseModel):
    intervals: List[IntervalModel]
    interval_totals: List[float]
    params: ParamsModel
    weights: WeightsModel
    converged: bool
    warnings: List[str]
    generation: int


class NodeCredModel(BaseModel):
    address: List[str]
    description: str
    cred: List[float]
    total: float


class StatusResponse(BaseModel):
    up_to_date: bool
    loading: bool
    generation: int


class ReanalyzeResponse(BaseModel):
    summary: CredSummaryResponse
    comparison: Dict[str, Any]


class GraphStatsResponse(BaseModel):
    nodes: int
    edges: int
    plugins: List[str]
    metadata: Dict[str, Any]
