from __future__ import annotations

from datetime import datetime, timezone
from typing import List

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from contextlib import asynccontextmanager

from backend.app.main import create_app
from backend.app.config import AppConfig
from backend.app.dependencies import get_cred_service
from backend.app.services.cred_service import CredService

from credgraph.graph.declarations import (
    EdgeType,
    NodeType,
    PluginDeclaration,
    weights_from_declarations,
)
from credgraph.graph.graph_schema import Edge, Node
from credgraph.graph.weighted_graph import WeightedGraph
from credgraph.graph.weights import EdgeWeight
from credgraph.utils.time import datetime_to_ms

# 2024-01-07 is a Sunday, so each of these sits inside its own week.
WEEK0 = datetime_to_ms(datetime(2024, 1, 8, 12, tzinfo=timezone.utc))
WEEK1 = datetime_to_ms(datetime(2024, 1, 15, 12, tzinfo=timezone.utc))
WEEK2 = datetime_to_ms(datetime(2024, 1, 22, 12, tzinfo=timezone.utc))


def make_chain_graph() -> WeightedGraph:
    """
    A -> B -> C, all in one week, default weights everywhere.
    """
    graph = WeightedGraph()
    for name in ("A", "B", "C"):
        graph.add_node(Node.create(["test", name], WEEK0))
    graph.add_edge(Edge.create(["edge", "ab"], ["test", "A"], ["test", "B"]))
    graph.add_edge(Edge.create(["edge", "bc"], ["test", "B"], ["test", "C"]))
    return graph


ISSUE = NodeType("issue", "issues", ("git", "issue"), 2.0, "an issue")
COMMIT = NodeType("commit", "commits", ("git", "commit"), 1.0)
USER = NodeType("user", "users", ("git", "user"), 1.0, "an account")
AUTHORS = EdgeType("authors", "is authored by", ("git", "authors"), EdgeWeight(0.5, 1.0))
REFERENCES = EdgeType("references", "is referenced by", ("git", "references"), EdgeWeight(1.0, 0.25))

GIT = PluginDeclaration(
    name="git",
    node_prefix=("git",),
    edge_prefix=("git",),
    node_types=(ISSUE, COMMIT, USER),
    edge_types=(AUTHORS, REFERENCES),
    user_types=(USER,),
)


def make_project_graph() -> WeightedGraph:
    """
    Two timeless users contributing issues and commits over three weeks.
    """
    graph = WeightedGraph(weights_from_declarations([GIT]))

    graph.add_node(Node.create(["git", "user", "alice"], None, "alice"))
    graph.add_node(Node.create(["git", "user", "bob"], None, "bob"))

    graph.add_node(Node.create(["git", "issue", "1"], WEEK0, "issue 1"))
    graph.add_node(Node.create(["git", "commit", "c1"], WEEK0, "commit c1"))
    graph.add_node(Node.create(["git", "issue", "2"], WEEK1, "issue 2"))
    graph.add_node(Node.create(["git", "commit", "c2"], WEEK2, "commit c2"))

    edges: List[Edge] = [
        Edge.create(["git", "authors", "1"], ["git", "user", "alice"], ["git", "issue", "1"]),
        Edge.create(["git", "authors", "c1"], ["git", "user", "bob"], ["git", "commit", "c1"]),
        Edge.create(["git", "authors", "2"], ["git", "user", "alice"], ["git", "issue", "2"]),
        Edge.create(["git", "authors", "c2"], ["git", "user", "bob"], ["git", "commit", "c2"]),
        Edge.create(["git", "references", "c2-1"], ["git", "commit", "c2"], ["git", "issue", "1"]),
    ]
    for edge in edges:
        graph.add_edge(edge)
    return graph


@pytest.fixture()
def chain_graph() -> WeightedGraph:
    return make_chain_graph()


@pytest.fixture()
def project_graph() -> WeightedGraph:
    return make_project_graph()


@pytest.fixture()
def service(project_graph: WeightedGraph) -> CredService:
    config = AppConfig()
    service = CredService(
        graph=project_graph,
        declarations=[GIT],
        params=config.params,
        config=config.credgraph,
    )
    yield service
    service.session.shutdown()


@pytest.fixture()
def client(service: CredService):
    @asynccontextmanager
    async def _no_lifespan(_: FastAPI):
        yield

    app = create_app(AppConfig())
    app.router.lifespan_context = _no_lifespan

    app.dependency_overrides[get_cred_service] = lambda: service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
