import json
from pathlib import Path

import pytest

from simulation.runner import (
    SimulationConfig,
    SimulationRunner,
    SimulationStats,
    _build_simulation_config,
    _parse_args,
    format_hand_report,
    main,
)


def test_config_from_dict_defaults_and_overrides():
    default = SimulationConfig.from_dict({})
    assert default.num_hands == 3
    assert default.max_raises == 4
    assert default.max_actions == 12
    assert default.action_log_mode is None

    config = SimulationConfig.from_dict(
        {
            "num_hands": 10,
            "seed": 4,
            "max_raises": 3,
            "action_log": {"mode": "jsonl", "path": "out/hands.jsonl"},
            "verify_with_treys": True,
        }
    )
    assert config.num_hands == 10
    assert config.seed == 4
    assert config.max_raises == 3
    assert config.action_log_path == Path("out/hands.jsonl")
    assert config.verify_with_treys


def test_config_from_dict_accepts_null_action_log():
    config = SimulationConfig.from_dict({"action_log": None, "num_hands": 4})
    assert config.num_hands == 4
    assert config.action_log_mode is None
    assert config.action_log_path is None


def test_cli_flags_override_config_file(tmp_path):
    config_path = tmp_path / "sim.json"
    config_path.write_text(json.dumps({"num_hands": 8, "seed": 1, "table_workers": 2}))
    args = _parse_args(["--config", str(config_path), "--hands", "2", "--verify-with-treys"])
    config = _build_simulation_config(args)
    assert config.num_hands == 2
    assert config.seed == 1
    assert config.table_workers == 2
    assert config.verify_with_treys


@pytest.mark.parametrize(
    "field, value",
    [("num_hands", -1), ("max_raises", 0), ("max_actions", 0), ("table_workers", 0)],
)
def test_invalid_config_rejected(evaluator, field, value):
    config = SimulationConfig(**{field: value})
    with pytest.raises(ValueError):
        SimulationRunner(config, evaluator)


def test_stats_count_wins_ties_and_categories():
    stats = SimulationStats()
    stats.update_from_summary(
        {"winner": 1, "players": [{"category": "Flush"}, {"category": "One Pair"}]}
    )
    stats.update_from_summary(
        {"winner": None, "players": [{"category": "Straight"}, {"category": "Straight"}]}
    )
    assert stats.as_dict() == {
        "hands_played": 2,
        "ties": 1,
        "win_counts": {1: 1},
        "category_counts": {"Flush": 1, "One Pair": 1, "Straight": 2},
    }


def test_seeded_runs_replay_identically(evaluator):
    def collect(seed):
        runner = SimulationRunner(SimulationConfig(num_hands=5, seed=seed), evaluator)
        seen = []
        runner.subscribe(lambda s: seen.append((s["winner"], [p["index"] for p in s["players"]])))
        runner.run()
        return seen

    assert collect(99) == collect(99)


def test_run_verifies_against_treys_and_reports(evaluator):
    runner = SimulationRunner(
        SimulationConfig(num_hands=25, seed=3, verify_with_treys=True), evaluator
    )
    reports = []
    runner.subscribe(lambda s: reports.append(format_hand_report(s["hand_number"], s["result"])))
    stats = runner.run()

    assert stats.hands_played == 25
    assert sum(stats.win_counts.values()) + stats.ties == 25
    assert sum(stats.category_counts.values()) == 50
    first = reports[0]
    assert first[1] == "HAND #1"
    assert "-- Preflop --" in first
    assert "-- Showdown --" in first
    assert any(line.startswith("Flop: ") for line in first)
    assert first[-1].startswith("Result: ")


def test_run_writes_jsonl_action_log(tmp_path, evaluator):
    path = tmp_path / "hands.jsonl"
    config = SimulationConfig(num_hands=2, seed=8, action_log_mode="jsonl", action_log_path=path)
    SimulationRunner(config, evaluator).run()
    events = [json.loads(line) for line in path.read_text().splitlines()]
    showdowns = [e for e in events if e["event"] == "showdown"]
    assert [e["hand_id"] for e in showdowns] == ["1", "2"]


def test_main_prints_transcript_and_summary(capsys, table):
    main(["--hands", "1", "--seed", "12", "--log-level", "WARNING"])
    out = capsys.readouterr().out
    assert "HAND #1" in out
    assert "Simulation complete." in out
    summary = json.loads(out[out.index("{"):])
    assert summary["hands_played"] == 1
