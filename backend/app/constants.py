DEFAULTS = {
    # Service title reported by the API
    "APP_NAME": "credgraph-backend",
    # Prefix for all routes
    "API_PREFIX": "",
    # Directory holding nodes/edges/declarations/weights inputs
    "PROCESSED_DIR": "data/processed",
    # Teleportation probability of the random walk
    "CRED_ALPHA": 0.05,
    # Carryover retention between consecutive intervals
    "CRED_INTERVAL_DECAY": 0.5,
    # Interval width in days (fixed calendar)
    "INTERVAL_WIDTH_DAYS": 7,
    # Interval boundary anchor in epoch ms (1970-01-04, a Sunday)
    "INTERVAL_ANCHOR_MS": 259200000,
    # "fixed" for anchor + k * width, "month" for UTC calendar months
    "INTERVAL_CALENDAR": "fixed",
    # L1 convergence tolerance of the power iteration
    "SOLVER_TOLERANCE": 1e-7,
    # Iteration cap per interval
    "SOLVER_MAX_ITERATIONS": 1000,
    # Default number of nodes returned by /cred/nodes
    "NODE_LIST_LIMIT": 100,
    # Number of top movers reported after a reanalysis
    "COMPARISON_TOP_MOVERS": 5,
}
