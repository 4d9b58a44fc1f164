"""Metrics collection and reporting for tool invocations."""

from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass
class ToolMetric:
    """Metrics for a single tool call."""

    name: str
    started: float = field(default_factory=time.time)
    wall_time: float = 0.0
    success: bool = False
    error: str = ""


@dataclass
class MetricsCollector:
    """Collects and reports metrics across a session.

    Each call owns its ToolMetric, so overlapping calls never mix up
    names or timings.
    """

    calls: list[ToolMetric] = field(default_factory=list)
    run_start: float = field(default_factory=time.time)

    def begin(self, name: str) -> ToolMetric:
        return ToolMetric(name=name)

    def end(self, metric: ToolMetric, success: bool, error: str = "") -> None:
        metric.wall_time = time.time() - metric.started
        metric.success = success
        metric.error = error
        self.calls.append(metric)

    @property
    def total_wall_time(self) -> float:
        return time.time() - self.run_start

    @property
    def calls_succeeded(self) -> int:
        return sum(1 for c in self.calls if c.success)

    @property
    def calls_failed(self) -> int:
        return sum(1 for c in self.calls if not c.success)

    def print_call_summary(self, metric: ToolMetric) -> None:
        status = "OK" if metric.success else "FAIL"
        err_info = f" err={metric.error.splitlines()[0]}" if metric.error else ""
        print(f"  {metric.name:<30} [{status}] {metric.wall_time:5.2f}s{err_info}")

    def print_report(self) -> None:
        print("\n" + "=" * 60)
        print("  TOOL CALLS")
        print("=" * 60)
        for c in self.calls:
            self.print_call_summary(c)
        print("-" * 60)
        print(f"  Succeeded: {self.calls_succeeded}/{len(self.calls)}")
        print(f"  Session time: {self.total_wall_time:.1f}s")
        print("=" * 60 + "\n")
