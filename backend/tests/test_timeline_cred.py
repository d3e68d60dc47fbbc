import numpy as np
import pytest

from credgraph.config.settings import CredConfig, SolverConfig
from credgraph.errors import ConvergenceWarning, InvalidParameterError
from credgraph.graph.graph_schema import Edge, Node
from credgraph.graph.weighted_graph import WeightedGraph
from credgraph.graph.weights import EdgeWeight, Weights
from credgraph.timeline.params import TimelineCredParameters
from credgraph.timeline.timeline_cred import compute, reanalyze

from conftest import WEEK0, WEEK1, make_chain_graph


def test_each_interval_sums_to_its_mass(project_graph):
    cred = compute(project_graph)

    assert len(cred.intervals()) == 3
    assert cred.scores.shape == (6, 3)
    assert (cred.scores >= 0).all()
    np.testing.assert_allclose(cred.scores.sum(axis=0), cred.interval_totals(), atol=1e-6)
    assert cred.total_cred() == pytest.approx(cred.interval_totals().sum())


def test_interval_totals_follow_seed_mass(project_graph):
    cred = compute(project_graph, params={"alpha": 0.05, "interval_decay": 0.5})

    # issue 1 (2) + c1 (1), then issue 2 (2), then c2 (1)
    np.testing.assert_allclose(cred.interval_totals(), [3.0, 3.5, 2.75])


def test_compute_is_deterministic(project_graph):
    first = compute(project_graph)
    second = compute(project_graph)

    assert np.array_equal(first.scores, second.scores)
    assert first.addresses() == second.addresses()


def test_reanalyze_with_same_inputs_is_close(project_graph):
    cred = compute(project_graph)

    again = cred.reanalyze()

    assert again is not cred
    assert again.allclose(cred)


def test_reanalyze_leaves_previous_result_unchanged(project_graph):
    cred = compute(project_graph)
    before = cred.scores.copy()

    changed = reanalyze(
        cred,
        Weights(node_weights={("git", "issue"): 10.0}),
        {"alpha": 0.3, "interval_decay": 0.1},
    )

    assert np.array_equal(cred.scores, before)
    assert cred.params() == TimelineCredParameters()
    assert cred.weights().node_weights[("git", "issue")] == 2.0
    assert changed.params() == TimelineCredParameters(alpha=0.3, interval_decay=0.1)
    assert not changed.allclose(cred)


def test_scores_are_read_only(project_graph):
    cred = compute(project_graph)

    with pytest.raises(ValueError):
        cred.scores[0, 0] = 1.0


@pytest.mark.parametrize(
    "params",
    [
        {"alpha": 1.5, "interval_decay": 0.5},
        {"alpha": 0.05, "interval_decay": -0.1},
        {"alpha": 0.05, "intervalDecay": 2.0},
        {"alpha": 0.05, "interval_decay": 0.5, "beta": 1.0},
    ],
)
def test_invalid_params_fail_before_any_work(project_graph, monkeypatch, params):
    def _unreachable(*args, **kwargs):
        raise AssertionError("partitioning must not start")

    monkeypatch.setattr("credgraph.timeline.timeline_cred.partition_graph", _unreachable)

    with pytest.raises(InvalidParameterError):
        compute(project_graph, params=params)


def test_invalid_params_dataclass():
    with pytest.raises(InvalidParameterError):
        TimelineCredParameters(alpha=1.5)
    with pytest.raises(InvalidParameterError):
        TimelineCredParameters(interval_decay=-0.1)


def test_invalid_weights_document_is_rejected(project_graph):
    with pytest.raises(InvalidParameterError):
        compute(project_graph, {"node_weights": [{"prefix": ["git"], "weight": -1}]})


def test_empty_graph_has_no_intervals():
    cred = compute(WeightedGraph())

    assert cred.intervals() == ()
    assert cred.addresses() == []
    assert cred.scores.shape == (0, 0)
    assert cred.filter() == []
    assert cred.total_cred() == 0.0


def test_no_decay_isolates_each_interval():
    graph = WeightedGraph()
    for name, ts in (("a", WEEK0), ("b", WEEK0), ("c", WEEK1), ("d", WEEK1)):
        graph.add_node(Node.create([name], ts))
    graph.add_edge(Edge.create(["e", "ab"], ["a"], ["b"]))
    graph.add_edge(Edge.create(["e", "cd"], ["c"], ["d"]))

    standalone = WeightedGraph()
    standalone.add_node(Node.create(["c"], WEEK1))
    standalone.add_node(Node.create(["d"], WEEK1))
    standalone.add_edge(Edge.create(["e", "cd"], ["c"], ["d"]))

    params = {"alpha": 0.1, "interval_decay": 0.0}
    full = compute(graph, params=params)
    alone = compute(standalone, params=params)

    assert full.cred_for(("a",)).cred[1] == pytest.approx(0.0, abs=1e-9)
    assert full.cred_for(("b",)).cred[1] == pytest.approx(0.0, abs=1e-9)
    np.testing.assert_allclose(
        full.scores[2:, 1],
        alone.scores[:, 0],
        atol=1e-6,
    )


def test_full_decay_repeats_a_quiet_interval():
    graph = WeightedGraph.build(
        make_chain_graph().get_nodes(),
        make_chain_graph().get_edges(),
        Weights(edge_weights={("muted",): EdgeWeight(0.0, 0.0)}),
    )
    # a muted edge opens a second week with no new activity
    graph.add_edge(
        Edge.create(["muted", "1"], ["test", "A"], ["test", "C"], timestamp_ms=WEEK1)
    )

    cred = compute(graph, params={"alpha": 0.1, "interval_decay": 1.0})

    assert len(cred.intervals()) == 2
    np.testing.assert_allclose(cred.scores[:, 0], cred.scores[:, 1], atol=1e-6)


def test_weights_are_copied_on_entry(project_graph):
    weights = Weights(node_weights={("git", "issue"): 4.0})
    cred = compute(project_graph, weights)

    weights.node_weights[("git", "issue")] = 100.0
    cred.weights().node_weights[("git", "issue")] = 100.0

    assert cred.weights().node_weights[("git", "issue")] == 4.0
    assert project_graph.weights.node_weights[("git", "issue")] == 2.0


def test_params_up_to_date(project_graph):
    cred = compute(project_graph)

    assert cred.params_up_to_date(cred.weights(), cred.params())
    assert cred.params_up_to_date(cred.weights().to_dict(), {"alpha": 0.05, "interval_decay": 0.5})
    assert not cred.params_up_to_date(cred.weights(), {"alpha": 0.1, "interval_decay": 0.5})
    assert not cred.params_up_to_date(Weights(), cred.params())


def test_cred_for_and_filter(project_graph):
    cred = compute(project_graph)

    alice = cred.cred_for(("git", "user", "alice"))
    assert alice.description == "alice"
    assert len(alice.cred) == 3
    assert alice.total == pytest.approx(sum(alice.cred))

    with pytest.raises(KeyError):
        cred.cred_for(("git", "user", "carol"))

    users = cred.filter(("git", "user"))
    assert {u.address for u in users} == {("git", "user", "alice"), ("git", "user", "bob")}
    assert users[0].total >= users[1].total
    assert len(cred.filter(limit=2)) == 2
    totals = [c.total for c in cred.filter()]
    assert totals == sorted(totals, reverse=True)


def test_timeless_users_earn_cred_without_minting_it(project_graph):
    cred = compute(project_graph)

    for user in cred.filter(("git", "user")):
        assert user.total > 0
    # users never seed, so all cred is minted by timestamped nodes
    np.testing.assert_allclose(cred.interval_totals(), [3.0, 3.5, 2.75])


def test_reduce_size_keeps_top_nodes_and_overrides(project_graph):
    cred = compute(project_graph)

    reduced = cred.reduce_size(
        [("git", "user")],
        limit=1,
        node_overrides=[("git", "issue", "2"), ("git", "missing")],
    )

    top_user = cred.filter(("git", "user"), 1)[0].address
    assert set(reduced.addresses()) == {top_user, ("git", "issue", "2")}
    np.testing.assert_array_equal(reduced.interval_totals(), cred.interval_totals())
    np.testing.assert_array_equal(
        reduced.cred_for(top_user).cred, cred.cred_for(top_user).cred
    )


def test_unconverged_intervals_attach_warnings(project_graph):
    config = CredConfig(solver=SolverConfig(tolerance=1e-12, max_iterations=1))

    cred = compute(project_graph, config=config)

    assert not cred.converged
    assert len(cred.warnings) == len(cred.intervals())
    assert all(isinstance(w, ConvergenceWarning) for w in cred.warnings)
    assert [r.interval_index for r in cred.reports] == [0, 1, 2]
    np.testing.assert_allclose(cred.scores.sum(axis=0), cred.interval_totals(), atol=1e-6)


def test_default_run_converges(project_graph):
    cred = compute(project_graph)

    assert cred.converged
    assert cred.warnings == ()
    assert all(report.converged for report in cred.reports)


def test_numpy_scalar_params_are_accepted(project_graph):
    params = TimelineCredParameters(alpha=np.float32(0.25), interval_decay=np.float64(0.5))

    assert params.alpha == pytest.approx(0.25)
    assert type(params.alpha) is float

    cred = compute(project_graph, params={"alpha": np.float64(0.25), "interval_decay": np.int64(1)})
    assert cred.params() == TimelineCredParameters(alpha=0.25, interval_decay=1.0)


def test_weights_document_entry_without_prefix_is_rejected(project_graph):
    with pytest.raises(InvalidParameterError):
        compute(project_graph, {"node_weights": [{"weight": 2.0}]})
