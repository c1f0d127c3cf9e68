"""
Core Module - High-level pipeline orchestration.

Components:
-----------
- PipelineRunner: Builds a configured pipeline and drains it into a sink
- open_source: Creates the configured upstream iterable

Usage:
------
from waterslide.config import ConfigLoader
from waterslide.core import PipelineRunner

config = ConfigLoader.load_from_yaml('pipeline.yaml')
runner = PipelineRunner(config)
runner.run(sink=print)
runner.print_status()
"""

from .pipeline_runner import PipelineRunner, open_source

__all__ = [
    'PipelineRunner',
    'open_source',
]
