import json
import logging
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.app.config import AppConfig  # noqa: E402
from backend.app.dependencies import get_loaded_graph  # noqa: E402
from backend.app.services.cred_service import CredService  # noqa: E402

from credgraph.graph.graph_schema import format_address  # noqa: E402


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logger = logging.getLogger("credgraph.run")
    start = time.perf_counter()
    config = AppConfig()
    loaded = get_loaded_graph()

    service = CredService(
        graph=loaded.graph,
        declarations=loaded.declarations,
        params=config.params,
        config=config.credgraph,
        node_list_limit=config.node_list_limit,
        comparison_top_movers=config.comparison_top_movers,
    )
    logger.info("initial cred ready in %.2fs", time.perf_counter() - start)

    summary = service.summary()
    logger.info(
        "intervals=%s total=%.4f converged=%s",
        len(summary["intervals"]),
        sum(summary["interval_totals"]),
        summary["converged"],
    )
    for node_cred in service.nodes(limit=10):
        logger.info("%10.4f  %s", node_cred.total, format_address(node_cred.address))

    # Compare against a no-carryover run to show how much cred flows forward.
    result = service.reanalyze(
        None,
        {"alpha": config.params.alpha, "interval_decay": 0.0},
    )
    logger.info(json.dumps(result["comparison"], indent=2))
    service.session.shutdown()


if __name__ == "__main__":
    main()
