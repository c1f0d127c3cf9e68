"""
Pipeline Configuration Management - Configuration loading and validation.
Supports loading from YAML files with validation and defaults.
"""

import logging
import yaml
from typing import Dict, Any, List, Optional
from pathlib import Path
from dataclasses import asdict, dataclass, field

from ..pipeline.stages import STAGE_REGISTRY, UnknownStageError, build_stage
from ..sources.http_source import HttpSourceConfig


SOURCE_TYPES = ('jsonl', 'http')


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""
    pass


@dataclass
class StageConfig:
    """One entry of the ``stages`` list."""
    stage: str
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SourceConfig:
    """Where a configured pipeline reads its input from."""
    type: str = "jsonl"  # 'jsonl' or 'http'
    path: Optional[str] = None  # for 'jsonl'; '-' means stdin
    url: Optional[str] = None  # for 'http'
    http: HttpSourceConfig = field(default_factory=HttpSourceConfig)


@dataclass
class PipelineConfig:
    """Complete configuration for a runnable pipeline."""
    source: SourceConfig = field(default_factory=SourceConfig)
    stages: List[StageConfig] = field(default_factory=list)


class ConfigLoader:
    """Loads and saves pipeline configuration from/to YAML files."""

    @staticmethod
    def load_from_yaml(config_path: str) -> PipelineConfig:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            PipelineConfig object

        Raises:
            ConfigurationError: If configuration is invalid
        """
        logger = logging.getLogger(__name__)

        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(path, 'r') as f:
                config_dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}")
        except OSError as e:
            raise ConfigurationError(f"Failed to read {config_path}: {e}")

        if not config_dict:
            raise ConfigurationError(f"Empty configuration file: {config_path}")

        logger.info(f"Loaded configuration from {config_path}")

        return ConfigLoader.from_dict(config_dict)

    @staticmethod
    def from_dict(config_dict: Dict[str, Any]) -> PipelineConfig:
        """
        Parse a configuration mapping.

        Raises:
            ConfigurationError: If the mapping has the wrong shape
        """
        if not isinstance(config_dict, dict):
            raise ConfigurationError("Configuration must be a mapping")
        try:
            return ConfigLoader._parse_config(config_dict)
        except ConfigurationError:
            raise
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigurationError(f"Failed to parse configuration: {e}")

    @staticmethod
    def _parse_config(config_dict: Dict[str, Any]) -> PipelineConfig:
        """Parse configuration dictionary into PipelineConfig object."""

        source_cfg = config_dict.get('source') or {}
        http_cfg = source_cfg.get('http') or {}
        http = HttpSourceConfig(
            timeout_seconds=http_cfg.get('timeout_seconds', 30),
            max_retries=http_cfg.get('max_retries', 3),
            verify_ssl=http_cfg.get('verify_ssl', True),
            user_agent=http_cfg.get('user_agent', 'waterslide/1.0'),
            items_key=http_cfg.get('items_key'),
            next_key=http_cfg.get('next_key'),
            max_pages=http_cfg.get('max_pages'),
            retry_backoff_factor=http_cfg.get('retry_backoff_factor', 2.0),
            retry_on_status=http_cfg.get('retry_on_status'),
            headers=http_cfg.get('headers') or {},
        )
        source = SourceConfig(
            type=source_cfg.get('type', 'jsonl'),
            path=source_cfg.get('path'),
            url=source_cfg.get('url'),
            http=http,
        )

        stages = []
        for index, entry in enumerate(config_dict.get('stages') or []):
            if isinstance(entry, str):
                stages.append(StageConfig(stage=entry))
                continue
            if not isinstance(entry, dict) or 'stage' not in entry:
                raise ConfigurationError(
                    f"stages[{index}] must be a stage name or a mapping with a 'stage' key"
                )
            stages.append(StageConfig(stage=entry['stage'],
                                      params=dict(entry.get('params') or {})))

        return PipelineConfig(source=source, stages=stages)

    @staticmethod
    def to_dict(config: PipelineConfig) -> Dict[str, Any]:
        """Convert configuration to plain data."""
        return {
            'source': asdict(config.source),
            'stages': [asdict(stage) for stage in config.stages],
        }

    @staticmethod
    def save_to_yaml(config: PipelineConfig, output_path: str):
        """Save configuration to YAML file."""
        logger = logging.getLogger(__name__)

        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(path, 'w') as f:
                yaml.safe_dump(ConfigLoader.to_dict(config), f,
                               default_flow_style=False, indent=2, sort_keys=False)
            logger.info(f"Configuration saved to {output_path}")
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to save configuration: {e}")

    @staticmethod
    def create_default_config() -> PipelineConfig:
        """Create a default configuration: JSON Lines in, JSON Lines out."""
        return PipelineConfig(
            source=SourceConfig(type='jsonl', path='-'),
            stages=[
                StageConfig(stage='json_decode'),
                StageConfig(stage='json_encode'),
            ]
        )


def validate_config(config: PipelineConfig) -> bool:
    """
    Validate pipeline configuration.

    Every stage is built once to check its name and parameters.

    Raises:
        ConfigurationError: If the configuration cannot be run
    """
    logger = logging.getLogger(__name__)

    if config.source.type not in SOURCE_TYPES:
        raise ConfigurationError(
            f"source.type must be one of {', '.join(SOURCE_TYPES)}, got '{config.source.type}'"
        )

    if config.source.type == 'http' and not config.source.url:
        raise ConfigurationError("source.url is required for http sources")

    if config.source.http.max_retries < 0:
        raise ConfigurationError("source.http.max_retries cannot be negative")

    for index, stage_config in enumerate(config.stages):
        if stage_config.stage not in STAGE_REGISTRY:
            raise ConfigurationError(
                f"stages[{index}]: unknown stage '{stage_config.stage}'"
            )
        try:
            build_stage(stage_config.stage, stage_config.params)
        except (TypeError, ValueError, UnknownStageError) as e:
            raise ConfigurationError(
                f"stages[{index}] ({stage_config.stage}): invalid params: {e}"
            )
        except ImportError as e:
            raise ConfigurationError(
                f"stages[{index}] ({stage_config.stage}): missing optional "
                f"dependency ({e}); install waterslide[bloom]"
            )

    logger.info("Configuration validated successfully")
    return True
