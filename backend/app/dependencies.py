from functools import lru_cache
import logging
from pathlib import Path
import time

from backend.app.config import AppConfig
from backend.app.services.cred_service import CredService
from backend.app.loaders.graph_loader import LoadedGraph, load_graph_from_processed


@lru_cache
def get_config() -> AppConfig:
    return AppConfig()


@lru_cache
def get_loaded_graph() -> LoadedGraph:
    logger = logging.getLogger("credgraph.startup")
    t0 = time.perf_counter()
    config = get_config()
    loaded = load_graph_from_processed(processed_dir=Path(config.processed_dir))
    logger.info("[startup] graph load in %.3fs", time.perf_counter() - t0)
    return loaded


@lru_cache
def get_cred_service() -> CredService:
    config = get_config()
    loaded = get_loaded_graph()

    t0 = time.perf_counter()
    service = CredService(
        graph=loaded.graph,
        declarations=loaded.declarations,
        params=config.params,
        config=config.credgraph,
        node_list_limit=config.node_list_limit,
        comparison_top_movers=config.comparison_top_movers,
    )
    logging.getLogger("credgraph.startup").info(
        "[startup] initial cred computed in %.3fs",
        time.perf_counter() - t0,
    )
    return service
