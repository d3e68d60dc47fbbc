"""
Evaluation utilities for comparing cred results.
"""

from credgraph.evaluation.metrics import CredComparison, Mover

__all__ = [
    "CredComparison",
    "Mover",
]
