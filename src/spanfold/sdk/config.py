# SPDX-FileCopyrightText: 2026 The Spanfold Authors
# SPDX-License-Identifier: Apache-2.0

"""Configuration for the trace translator.

Configuration precedence (highest to lowest):
1. Code arguments (explicit values passed to TranslatorConfig)
2. Environment variables (SPANFOLD_*)
3. YAML config file (spanfold.yaml or specified path)
4. Built-in defaults
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from spanfold.otlp.attributes import DEFAULT_MAX_DEPTH
from spanfold.otlp.classification import CATEGORY_RULES
from spanfold.otlp.request import DEFAULT_DATASET
from spanfold.otlp.spans import SAMPLE_RATE_KEYS

logger = logging.getLogger(__name__)


@dataclass
class TranslatorConfig:
    """Tunables of :func:`spanfold.otlp.traces.translate_trace_request`.

    Example::

        >>> config = TranslatorConfig(default_dataset="orphans")

        >>> # Or load from YAML
        >>> config = TranslatorConfig.from_yaml("config/spanfold.yaml")
    """

    # Dataset used when a resource carries no usable service.name
    default_dataset: Optional[str] = None

    # Nested attribute maps are expanded into dotted keys up to this depth
    max_attribute_depth: Optional[int] = None

    # Attribute keys holding a per-span sample rate, in lookup order
    sample_rate_keys: Tuple[str, ...] = SAMPLE_RATE_KEYS

    # Ordered (attribute key, category) pairs; the first key present wins
    category_rules: Tuple[Tuple[str, str], ...] = CATEGORY_RULES

    _config_file: Optional[str] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        """Apply environment variable defaults."""
        if self.default_dataset is None:
            self.default_dataset = os.getenv("SPANFOLD_DEFAULT_DATASET", DEFAULT_DATASET)

        if self.max_attribute_depth is None:
            env_depth = os.getenv("SPANFOLD_MAX_ATTRIBUTE_DEPTH")
            self.max_attribute_depth = int(env_depth) if env_depth else DEFAULT_MAX_DEPTH

        if self.max_attribute_depth < 0:
            raise ValueError(f"max_attribute_depth must be >= 0, got {self.max_attribute_depth}")

        self.sample_rate_keys = tuple(self.sample_rate_keys)
        self.category_rules = tuple((str(key), str(category)) for key, category in self.category_rules)

    # ------------------------------------------------------------------
    # YAML loading
    # ------------------------------------------------------------------

    @classmethod
    def from_yaml(cls, path: Optional[str] = None) -> TranslatorConfig:
        """Load configuration from a YAML file.

        Supports environment variable interpolation using ``${VAR_NAME}`` syntax.

        Raises:
            FileNotFoundError: If config file doesn't exist.
            ValueError: If YAML is malformed.
        """
        if path is None:
            raise FileNotFoundError("No config file path provided")

        resolved = Path(path)
        if not resolved.exists():
            raise FileNotFoundError(f"Config file not found: {resolved}")

        try:
            import yaml  # type: ignore[import-untyped]
        except ImportError as err:
            raise ImportError("PyYAML required for YAML config. Install with: pip install spanfold[yaml]") from err

        with open(resolved) as fh:
            raw_content = fh.read()

        content = _interpolate_env_vars(raw_content)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {resolved}: {exc}") from exc

        if data is None:
            data = {}

        return cls._from_dict(data, config_file=str(resolved))

    @classmethod
    def from_file_or_env(cls, path: Optional[str] = None) -> TranslatorConfig:
        """Load config from file if exists, otherwise use environment variables.

        Search order:
        1. Explicit *path* argument
        2. ``SPANFOLD_CONFIG_FILE`` env var
        3. ``./spanfold.yaml``
        4. ``./config/spanfold.yaml``
        5. Falls back to env-only config
        """
        search_paths: List[Path] = []

        if path:
            search_paths.append(Path(path))

        env_path = os.getenv("SPANFOLD_CONFIG_FILE")
        if env_path:
            search_paths.append(Path(env_path))

        search_paths.extend(
            [
                Path("spanfold.yaml"),
                Path("spanfold.yml"),
                Path("config/spanfold.yaml"),
                Path("config/spanfold.yml"),
            ]
        )

        for candidate in search_paths:
            if candidate.exists():
                logger.info("Loading config from: %s", candidate)
                return cls.from_yaml(str(candidate))

        logger.debug("No config file found, using environment variables only")
        return cls()

    @classmethod
    def _from_dict(
        cls,
        data: Dict[str, Any],
        config_file: Optional[str] = None,
    ) -> TranslatorConfig:
        """Create config from dictionary (parsed YAML)."""
        routing = data.get("routing", {})
        attributes = data.get("attributes", {})
        sampling = data.get("sampling", {})
        classification = data.get("classification", {})

        return cls(
            default_dataset=routing.get("default_dataset"),
            max_attribute_depth=attributes.get("max_depth"),
            sample_rate_keys=tuple(sampling.get("keys") or SAMPLE_RATE_KEYS),
            category_rules=tuple(classification.get("rules") or CATEGORY_RULES),
            _config_file=config_file,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return {
            "routing": {
                "default_dataset": self.default_dataset,
            },
            "attributes": {
                "max_depth": self.max_attribute_depth,
            },
            "sampling": {
                "keys": list(self.sample_rate_keys),
            },
            "classification": {
                "rules": [list(rule) for rule in self.category_rules],
            },
        }


def _interpolate_env_vars(content: str) -> str:
    """Interpolate ``${VAR_NAME}`` and ``${VAR_NAME:-default}`` in *content*."""
    pattern = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")

    def _replace(match: re.Match) -> str:  # type: ignore[type-arg]
        var_name = match.group(1)
        default = match.group(2)
        value = os.getenv(var_name)
        if value is not None:
            return value
        if default is not None:
            return default
        return match.group(0)

    return pattern.sub(_replace, content)
