"""Pipeline of verbs applied to a TblJson in order."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from . import verbs
from .parser import JSONParser
from .profiler import PerformanceProfiler
from .tbl_json import Source, TblJson, to_tbl_json
from .types import ErrorType, ProcessingError


VERBS: Dict[str, Callable[..., TblJson]] = {
    "gather_array": verbs.gather_array,
    "gather_keys": verbs.gather_keys,
    "gather_object": verbs.gather_object,
    "enter_object": verbs.enter_object,
    "filter_json_types": verbs.filter_json_types,
    "spread_values": verbs.spread_values,
    "spread_all": verbs.spread_all,
    "append_values_string": verbs.append_values_string,
    "append_values_number": verbs.append_values_number,
    "append_values_logical": verbs.append_values_logical,
    "json_types": verbs.json_types,
    "json_lengths": verbs.json_lengths,
    "json_complexity": verbs.json_complexity,
}


@dataclass
class PipelineStep:
    """One verb call with its arguments."""
    verb: str
    args: Tuple[Any, ...] = ()
    kwargs: Dict[str, Any] = field(default_factory=dict)

    def apply(self, tbl: TblJson) -> TblJson:
        return VERBS[self.verb](tbl, *self.args, **self.kwargs)

    def describe(self) -> str:
        parts = [repr(arg) for arg in self.args]
        parts.extend(f"{key}={value!r}" for key, value in self.kwargs.items())
        return f"{self.verb}({', '.join(parts)})"


class Pipeline:
    """
    An ordered list of verb calls.

    Steps run one after the other, each on the TblJson produced by the
    previous one. Row counts are logged per step, and with ``profile=True``
    every step is measured by a PerformanceProfiler.
    """

    def __init__(self, steps: Optional[List[PipelineStep]] = None,
                 logger: Optional[logging.Logger] = None,
                 profile: bool = False,
                 parser: Optional[JSONParser] = None):
        """
        Initialize the pipeline.

        Args:
            steps: Initial steps
            logger: Optional logger instance
            profile: Measure each step with a PerformanceProfiler
            parser: Optional JSONParser used by ``run`` for text sources
        """
        self.logger = logger or logging.getLogger(__name__)
        self.steps: List[PipelineStep] = list(steps or [])
        self.parser = parser or JSONParser(logger=self.logger)
        self.profiler = PerformanceProfiler(self.logger) if profile else None

    def __len__(self) -> int:
        return len(self.steps)

    def then(self, verb: str, *args: Any, **kwargs: Any) -> "Pipeline":
        """
        Append a step and return the pipeline for chaining.

        Raises:
            ProcessingError: If ``verb`` is not a known verb
        """
        if verb not in VERBS:
            raise ProcessingError(
                f"Unknown verb '{verb}'; known verbs: {', '.join(sorted(VERBS))}",
                ErrorType.ARGUMENT,
                context={"verb": verb}
            )
        self.steps.append(PipelineStep(verb, args, kwargs))
        return self

    def run(self, source: Source, json_column: Optional[str] = None) -> TblJson:
        """
        Convert ``source`` to a TblJson and apply every step.

        Args:
            source: Anything ``to_tbl_json`` accepts
            json_column: JSON column name for table sources

        Returns:
            The TblJson produced by the last step
        """
        tbl = to_tbl_json(source, json_column, parser=self.parser)
        self.logger.info(f"Running pipeline of {len(self.steps)} steps on {len(tbl)} rows")

        for step in self.steps:
            if self.profiler is None:
                result = step.apply(tbl)
            else:
                with self.profiler.profile_operation(step.describe(), len(tbl)) as profiler:
                    result = step.apply(tbl)
                    profiler.record_output(len(result))
            self.logger.debug(f"{step.describe()}: {len(tbl)} -> {len(result)} rows")
            tbl = result

        self.logger.info(f"Pipeline finished with {len(tbl)} rows and {len(tbl.table.column_names)} columns")
        return tbl
