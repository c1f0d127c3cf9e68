"""
Configuration Module - Configuration management and loading.

This module handles loading, saving, and validating pipeline configurations.
It supports YAML-based configuration files.

Components:
-----------
- ConfigLoader: Loads and saves configurations from/to YAML files
- validate_config: Validates configuration objects
- ConfigurationError: Exception raised for invalid configurations

Configuration File Format:
-------------------------
source:
  type: http                 # or 'jsonl'
  url: https://api.example.com/users
  http:
    items_key: results
    next_key: next

stages:
  - stage: field_equals
    params: {field: active, value: true}
  - stage: sort
    params: {key: name}
  - json_encode              # bare name, no params
"""

from .pipeline_config import (
    ConfigLoader,
    ConfigurationError,
    PipelineConfig,
    SourceConfig,
    StageConfig,
    validate_config,
)

__all__ = [
    'ConfigLoader',
    'ConfigurationError',
    'PipelineConfig',
    'SourceConfig',
    'StageConfig',
    'validate_config',
]
