"""
Tests for bot-vs-bot simulation and the command line.
"""

import json

import pytest

from ..bots.policy import FirstLegalPolicy
from ..cli import main
from ..config import Settings
from ..engine_core.setup import create_game
from ..simulation import SimulationReport, default_policies, run_simulations, simulate_game


class TestSimulateGame:

    def test_default_four_players(self):
        result = simulate_game(seed=4)
        assert result.final_state.num_players == 4
        assert result.winner_name in ("Alice", "Bob", "Carol", "Dave")
        assert result.moves > 0

    def test_first_legal_bots_finish(self):
        # Income forever, then forced coups: the game still ends
        state = create_game(["A", "B"], seed=1)
        policies = {p.player_id: FirstLegalPolicy() for p in state.players}
        result = simulate_game(["A", "B"], policies=policies, seed=1)
        assert result.error is None
        assert result.winner_id is not None

    def test_turn_limit(self):
        result = simulate_game(seed=4, max_turns=2)
        assert result.timed_out
        assert result.winner_id is None

    def test_default_policies_are_seeded(self):
        state = create_game(["A", "B", "C"], seed=1)
        first = default_policies(state, seed=7)
        second = default_policies(state, seed=7)
        assert [b.rng.random() for b in first.values()] == [b.rng.random() for b in second.values()]


class TestRunSimulations:

    def test_report(self):
        report = run_simulations(5, names=["Ann", "Ben", "Cid"], seed=10)
        assert report.games == 5
        assert sum(report.wins.values()) + report.timeouts == 5
        assert set(report.wins) == {"Ann", "Ben", "Cid"}
        assert report.errors == []
        assert report.average_turns > 1

    def test_reproducible(self):
        a = run_simulations(3, seed=2).to_dict()
        b = run_simulations(3, seed=2).to_dict()
        assert a == b

    def test_empty_report(self):
        assert SimulationReport().average_turns == 0.0


class TestSettings:

    def test_defaults(self, monkeypatch):
        for var in ("COUP_ENV", "COUP_LOG_LEVEL", "ALLOWED_ORIGINS", "COUP_SESSION_TTL"):
            monkeypatch.delenv(var, raising=False)
        settings = Settings.from_env()
        assert settings.env == "development"
        assert settings.log_level == "INFO"
        assert settings.allowed_origins == ["*"]
        assert settings.session_ttl_seconds == 3600

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("COUP_LOG_LEVEL", "debug")
        monkeypatch.setenv("ALLOWED_ORIGINS", "http://a.test, http://b.test,")
        monkeypatch.setenv("COUP_SESSION_TTL", "60")
        monkeypatch.setenv("COUP_MAX_SIMULATION_TURNS", "50")
        settings = Settings.from_env()
        assert settings.log_level == "DEBUG"
        assert settings.allowed_origins == ["http://a.test", "http://b.test"]
        assert settings.session_ttl_seconds == 60
        assert settings.max_simulation_turns == 50


class TestCLI:

    def test_simulate_json(self, capsys):
        main(["simulate", "-n", "2", "--players", "3", "--seed", "1", "--json"])
        report = json.loads(capsys.readouterr().out)
        assert report["games"] == 2
        assert set(report["wins"]) == {"Alice", "Bob", "Carol"}

    def test_simulate_text(self, capsys):
        main(["simulate", "-n", "1", "--players", "2"])
        assert "Games played: 1" in capsys.readouterr().out

    def test_demo(self, capsys):
        main(["demo", "--players", "2", "--seed", "3"])
        out = capsys.readouterr().out
        assert "Game started!" in out
        assert "Winner:" in out

    def test_bad_player_count(self):
        with pytest.raises(SystemExit):
            main(["simulate", "--players", "9"])

    def test_no_command(self):
        with pytest.raises(SystemExit):
            main([])
