"""Performance profiler for pipeline steps."""

import json
import logging
import time
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

import psutil


@dataclass
class PerformanceMetrics:
    """Performance metrics for one verb call."""
    operation_name: str
    start_time: float
    end_time: float
    duration: float
    rows_in: int
    rows_out: int
    memory_start_mb: float
    memory_end_mb: float
    memory_peak_mb: float
    cpu_percent: float
    rows_per_second: float


class PerformanceProfiler:
    """
    Records duration, memory and row counts of pipeline steps.

    Memory figures are the resident set size of the current process as
    reported by psutil.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the performance profiler.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.metrics_history: List[PerformanceMetrics] = []
        self.current_operation: Optional[str] = None
        self.start_time: Optional[float] = None
        self.start_memory: Optional[float] = None
        self.peak_memory: float = 0
        self.rows_in: int = 0
        self.rows_out: int = 0
        self._process = psutil.Process()

    @contextmanager
    def profile_operation(self, operation_name: str, rows_in: int = 0):
        """
        Context manager for profiling one operation.

        Call ``record_output`` inside the block to report the rows produced.

        Args:
            operation_name: Name of the operation being profiled
            rows_in: Number of input rows
        """
        self.start_profiling(operation_name, rows_in)
        try:
            yield self
        finally:
            self.stop_profiling()

    def start_profiling(self, operation_name: str, rows_in: int = 0):
        self.current_operation = operation_name
        self.start_time = time.perf_counter()
        self.rows_in = rows_in
        self.rows_out = 0
        self.start_memory = self._memory_mb()
        self.peak_memory = self.start_memory
        self._process.cpu_percent()
        self.logger.debug(f"Started profiling: {operation_name}")

    def record_output(self, rows_out: int):
        """Report the number of rows the operation produced."""
        self.rows_out = rows_out
        self.peak_memory = max(self.peak_memory, self._memory_mb())

    def stop_profiling(self) -> PerformanceMetrics:
        """
        Stop profiling and return metrics.

        Returns:
            PerformanceMetrics for the finished operation

        Raises:
            ValueError: If no operation is being profiled
        """
        if not self.current_operation or self.start_time is None:
            raise ValueError("No active profiling session")

        end_time = time.perf_counter()
        duration = end_time - self.start_time
        end_memory = self._memory_mb()
        cpu_percent = self._process.cpu_percent()
        self.peak_memory = max(self.peak_memory, end_memory)

        metrics = PerformanceMetrics(
            operation_name=self.current_operation,
            start_time=self.start_time,
            end_time=end_time,
            duration=duration,
            rows_in=self.rows_in,
            rows_out=self.rows_out,
            memory_start_mb=self.start_memory,
            memory_end_mb=end_memory,
            memory_peak_mb=self.peak_memory,
            cpu_percent=cpu_percent,
            rows_per_second=self.rows_in / duration if duration > 0 else 0.0
        )
        self.metrics_history.append(metrics)

        self.logger.info(
            f"{metrics.operation_name}: {metrics.rows_in} -> {metrics.rows_out} rows "
            f"in {duration * 1000:.1f}ms, memory peak {metrics.memory_peak_mb:.1f} MB"
        )

        self.current_operation = None
        self.start_time = None
        self.start_memory = None
        return metrics

    def get_performance_summary(self) -> Dict[str, Any]:
        """
        Get summary of all recorded operations.

        Returns:
            Dictionary with performance summary
        """
        if not self.metrics_history:
            return {"total_operations": 0}

        return {
            "total_operations": len(self.metrics_history),
            "total_duration": sum(m.duration for m in self.metrics_history),
            "max_memory_peak_mb": max(m.memory_peak_mb for m in self.metrics_history),
            "operations": [
                {
                    "name": m.operation_name,
                    "duration": m.duration,
                    "rows_in": m.rows_in,
                    "rows_out": m.rows_out,
                    "memory_peak": m.memory_peak_mb
                }
                for m in self.metrics_history
            ]
        }

    def export_metrics(self, format: str = "json") -> str:
        """
        Export recorded metrics.

        Args:
            format: Export format ("json", "csv", "summary")

        Returns:
            Formatted metrics string
        """
        if format == "json":
            return json.dumps([asdict(m) for m in self.metrics_history], indent=2)

        elif format == "csv":
            lines = ["operation,duration,rows_in,rows_out,memory_peak_mb,rows_per_second"]
            for m in self.metrics_history:
                lines.append(f"{m.operation_name},{m.duration},{m.rows_in},{m.rows_out},"
                             f"{m.memory_peak_mb},{m.rows_per_second}")
            return "\n".join(lines)

        elif format == "summary":
            summary = self.get_performance_summary()
            if not summary["total_operations"]:
                return "Performance Summary: no operations recorded"
            lines = [
                "Performance Summary:",
                f"  Total Operations: {summary['total_operations']}",
                f"  Total Duration: {summary['total_duration']:.4f}s",
                f"  Max Memory Peak: {summary['max_memory_peak_mb']:.1f} MB",
            ]
            for op in summary["operations"]:
                lines.append(f"  {op['name']}: {op['rows_in']} -> {op['rows_out']} rows, "
                             f"{op['duration']:.4f}s")
            return "\n".join(lines)

        else:
            raise ValueError(f"Unsupported export format: {format}")

    def _memory_mb(self) -> float:
        return self._process.memory_info().rss / 1024 / 1024
