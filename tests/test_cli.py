"""Tests for the all-AI match CLI."""
import sys

from tripoley import play_random
from tripoley.betting import total_chips
from tripoley.state import Phase


def test_run_ai_match_default_difficulty():
    results = play_random.run_ai_match(4, 2, seed=3)
    assert len(results) == 2
    assert all(s.phase is Phase.GAME_OVER for s in results)
    assert all(total_chips(s) == 400 for s in results)


def test_run_ai_match_fixed_difficulty():
    results = play_random.run_ai_match(6, 1, seed=8, difficulty="hard")
    assert all(p.ai_difficulty == "hard" for p in results[0].players)


def test_main_prints_rounds(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["tripoley-sim", "--players", "5", "--rounds", "2", "--seed", "1"])
    play_random.main()
    out = capsys.readouterr().out
    assert "Round 1" in out
    assert "Round 2" in out
