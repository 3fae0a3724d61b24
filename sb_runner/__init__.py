"""Harness execution and benchmark sessions for statebench."""

from sb_runner.api import BenchmarkSession, HarnessRunner, Result, RunSettings

__all__ = ["BenchmarkSession", "HarnessRunner", "Result", "RunSettings"]
