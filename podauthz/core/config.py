"""
Configuration module for the PodAuthz engine.

Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Union
import logging
import re

from ..errors import ConfigurationError
from ..monitoring.metrics import MetricConfig
from ..util.config import load_config_file, load_config_from_env, merge_configs, parse_bool


_METRIC_NAME = re.compile(r'^[a-zA-Z_:][a-zA-Z0-9_:]*$')


@dataclass
class EngineConfig:
    """Configuration for the authorization engine"""
    log_level: str = "INFO"
    # Credential source name under which client grant permissions are reported
    permission_source: str = "client"
    # Whether grant modes given as ACL IRIs (acl:Read, ...) are recognized
    accept_acl_iris: bool = True
    metrics: MetricConfig = field(default_factory=MetricConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        """Create configuration from a (possibly flat) dictionary"""
        metrics_data = dict(data.get('metrics') or {})
        if 'metrics_enabled' in data:
            metrics_data['enabled'] = data['metrics_enabled']
        if 'metrics_namespace' in data:
            metrics_data['namespace'] = data['metrics_namespace']

        return cls(
            log_level=str(data.get('log_level', "INFO")).upper(),
            permission_source=data.get('permission_source', "client"),
            accept_acl_iris=parse_bool(data.get('accept_acl_iris', True)),
            metrics=MetricConfig(
                enabled=parse_bool(metrics_data.get('enabled', True)),
                namespace=metrics_data.get('namespace', "podauthz"),
            ),
        )

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create configuration from PODAUTHZ_* environment variables"""
        return cls.from_dict(load_config_from_env())

    @classmethod
    def from_file(cls, path: Union[str, Path], use_env: bool = True) -> "EngineConfig":
        """Create configuration from a JSON or YAML file, environment taking precedence"""
        data = load_config_file(path)
        if use_env:
            data = merge_configs(data, load_config_from_env())
        return cls.from_dict(data)

    def validate(self) -> bool:
        """Validate the configuration"""
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigurationError("Unknown log level", "log_level", self.log_level)
        if not self.permission_source:
            raise ConfigurationError("permission_source is required", "permission_source")
        if not _METRIC_NAME.match(self.metrics.namespace):
            raise ConfigurationError(
                "Invalid metrics namespace", "metrics_namespace", self.metrics.namespace
            )
        return True
