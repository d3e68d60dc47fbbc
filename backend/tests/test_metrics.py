import pytest

from credgraph.evaluation.metrics import CredComparison
from credgraph.graph.weights import Weights
from credgraph.timeline.timeline_cred import compute


def test_identical_results_compare_as_equal(project_graph):
    cred = compute(project_graph)
    comparison = CredComparison(cred, cred.reanalyze())

    assert comparison.max_total_change() == pytest.approx(0.0, abs=1e-6)
    assert comparison.total_correlation() == pytest.approx(1.0)
    assert all(d == pytest.approx(0.0, abs=1e-6) for d in comparison.interval_l1_distance())


def test_reweighting_shows_up_as_movers(project_graph):
    before = compute(project_graph)
    after = before.reanalyze(
        Weights(
            node_weights={("git", "issue"): 2.0, ("git", "commit"): 1.0},
            edge_weights={("git", "authors", "1"): (0.5, 0.0), ("git", "authors", "2"): (0.5, 0.0)},
        )
    )
    comparison = CredComparison(before, after)

    movers = {m.address: m for m in comparison.top_movers(10)}
    alice = movers[("git", "user", "alice")]
    assert alice.before > 0
    assert alice.after == pytest.approx(0.0, abs=1e-5)

    ranked = [abs(m.change) for m in comparison.top_movers(10)]
    assert ranked == sorted(ranked, reverse=True)
    assert comparison.max_total_change() == pytest.approx(ranked[0])

    summary = comparison.summary(limit=3)
    assert len(summary["top_movers"]) == 3
    assert len(summary["interval_l1_distance"]) == 3
    assert summary["interval_l1_distance"][0] > 0


def test_nodes_missing_on_one_side_count_as_zero(project_graph):
    cred = compute(project_graph)
    reduced = cred.reduce_size([("git", "user")], limit=1)
    comparison = CredComparison(reduced, cred)

    gained = {m.address: m for m in comparison.top_movers(10)}

    assert len(gained) == 6
    assert gained[("git", "issue", "1")].before == 0.0
    assert gained[("git", "issue", "1")].after > 0.0
