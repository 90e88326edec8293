"""Tests for the benchmark CLI."""

from __future__ import annotations

import pytest

from passphrase_envelope import benchmark


def test_time_kdf_is_positive():
    assert benchmark.time_kdf(100) > 0


def test_suggest_iterations_has_floor():
    assert benchmark.suggest_iterations(target_ms=0.0) == benchmark.CALIBRATION_ITERATIONS


def test_run_benchmark(monkeypatch, capsys):
    monkeypatch.setenv("PASSPHRASE_ENVELOPE_ITERATIONS", "1000")
    monkeypatch.setattr("builtins.input", lambda prompt: "2")

    benchmark.main()

    out = capsys.readouterr().out
    assert "Configured iterations: 1000" in out
    assert "[OK] 2 envelopes sealed and opened" in out
    assert "BENCHMARK COMPLETE" in out
    assert "[ERROR]" not in out
