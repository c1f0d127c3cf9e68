"""
Pipeline Runner - Builds configured pipelines and drains them into a sink.
This is the high-level interface used by the command line.
"""

import itertools
import logging
import sys
import time
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..config.pipeline_config import PipelineConfig, SourceConfig, ConfigurationError
from ..pipeline.source import wrap
from ..pipeline.stage import Stage
from ..pipeline.stages import build_stage
from ..sources import HttpJsonSource, JsonLinesSource


def open_source(source_config: SourceConfig) -> Iterable[Any]:
    """
    Create the upstream iterable described by a source configuration.

    Raises:
        ConfigurationError: If the source type is unknown or incomplete
    """
    if source_config.type == 'jsonl':
        if not source_config.path or source_config.path == '-':
            return (line.rstrip('\r\n') for line in sys.stdin)
        return JsonLinesSource(source_config.path)

    if source_config.type == 'http':
        if not source_config.url:
            raise ConfigurationError("source.url is required for http sources")
        return HttpJsonSource(source_config.url, source_config.http)

    raise ConfigurationError(f"Unknown source type: {source_config.type}")


class PipelineRunner:
    """
    Runs a pipeline described by a PipelineConfig.

    A fresh chain of stages is built for every run, since stages bind to
    their upstream only once. The stages of the latest run are kept for
    status reporting.
    """

    def __init__(self, config: PipelineConfig):
        """
        Initialize pipeline runner.

        Args:
            config: Complete pipeline configuration
        """
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)

        self.stages: List[Stage] = []
        self.delivered = 0
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None

    def build(self, source: Optional[Iterable[Any]] = None) -> Stage:
        """
        Compose the configured stages behind ``source``.

        Args:
            source: Upstream items (default: the configured source)

        Returns:
            Terminal stage, not yet evaluated
        """
        if source is None:
            source = open_source(self.config.source)

        head = wrap(source)
        self.stages = [head]
        current = head
        for stage_config in self.config.stages:
            current = current >> build_stage(stage_config.stage, stage_config.params)
            self.stages.append(current)

        self.logger.debug(f"Built pipeline with {len(self.stages) - 1} configured stages")
        return current

    def run(self, source: Optional[Iterable[Any]] = None,
            sink: Optional[Callable[[Any], Any]] = None,
            limit: Optional[int] = None) -> int:
        """
        Drain the pipeline into ``sink``.

        Args:
            source: Upstream items (default: the configured source)
            sink: Called with each output item (default: discard)
            limit: Stop after this many outputs

        Returns:
            Number of items delivered to the sink
        """
        terminal = self.build(source)
        outputs = terminal if limit is None else itertools.islice(terminal, limit)

        self.delivered = 0
        self.start_time = time.time()
        self.end_time = None
        self.logger.info("Starting pipeline run")
        try:
            for item in outputs:
                if sink is not None:
                    sink(item)
                self.delivered += 1
        finally:
            self.end_time = time.time()

        self.logger.info(
            f"Pipeline run finished: {self.delivered} items in {self.runtime:.2f}s"
        )
        return self.delivered

    @property
    def runtime(self) -> float:
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else time.time()
        return end - self.start_time

    def get_status(self) -> Dict[str, Any]:
        """Get run totals and per-stage statistics of the latest run."""
        return {
            'overall': {
                'delivered': self.delivered,
                'runtime_seconds': round(self.runtime, 2),
                'stages': len(self.stages),
            },
            'stages': [stage.get_stats() for stage in self.stages],
        }

    def print_status(self, stream=None):
        """Print a formatted summary of the latest run."""
        stream = stream or sys.stderr
        status = self.get_status()

        print("\n" + "=" * 60, file=stream)
        print("PIPELINE SUMMARY", file=stream)
        print("=" * 60, file=stream)
        print(f"Runtime: {status['overall']['runtime_seconds']:.2f}s", file=stream)
        print(f"Delivered: {status['overall']['delivered']}", file=stream)
        print("-" * 60, file=stream)

        for s in status['stages']:
            print(f"{s['name']}: processed={s['processed']} "
                  f"emitted={s['emitted']} dropped={s['dropped']}", file=stream)

        print("=" * 60 + "\n", file=stream)
