from dataclasses import dataclass
from dynaconf import Dynaconf
from backend.app.constants import DEFAULTS

from credgraph.config.settings import (
    DAY_MS,
    IntervalConfig,
    SolverConfig,
    CredConfig,
)
from credgraph.timeline.params import TimelineCredParameters

settings = Dynaconf(
    envvar_prefix="CREDGRAPH",
    load_dotenv=True,
    settings_files=[],
)
# Defaults fill gaps only; CREDGRAPH_* environment values take precedence.
for key, value in DEFAULTS.items():
    if not settings.exists(key):
        settings.set(key, value)


@dataclass(frozen=True)
class AppConfig:
    # ---------------- App ----------------
    app_name: str = settings.get("APP_NAME", "credgraph-backend")
    api_prefix: str = settings.get("API_PREFIX", "")

    # ---------------- Cred Parameters ----------------
    params: TimelineCredParameters = TimelineCredParameters(
        alpha=settings.get("CRED_ALPHA", 0.05),
        interval_decay=settings.get("CRED_INTERVAL_DECAY", 0.5),
    )

    # ---------------- Cred Policy ----------------
    credgraph: CredConfig = CredConfig(
        intervals=IntervalConfig(
            width_ms=int(settings.get("INTERVAL_WIDTH_DAYS", 7)) * DAY_MS,
            anchor_ms=int(settings.get("INTERVAL_ANCHOR_MS", 3 * DAY_MS)),
            calendar=settings.get("INTERVAL_CALENDAR", "fixed"),
        ),
        solver=SolverConfig(
            tolerance=float(settings.get("SOLVER_TOLERANCE", 1e-7)),
            max_iterations=int(settings.get("SOLVER_MAX_ITERATIONS", 1000)),
        ),
    )

    # ---------------- Data Paths ----------------
    processed_dir: str = settings.get("PROCESSED_DIR", "data/processed")

    # ---------------- Presentation ----------------
    node_list_limit: int = settings.get("NODE_LIST_LIMIT", 100)
    comparison_top_movers: int = settings.get("COMPARISON_TOP_MOVERS", 5)
