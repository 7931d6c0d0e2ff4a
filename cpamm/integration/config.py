"""
Service configuration.

Loaded from YAML (PyYAML) or built directly. Unknown keys are rejected so a
typo in a config file fails loudly instead of silently falling back to a default.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Union

import yaml


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class AmmConfig:
    # Signature replay protection: request signatures are bound to this deployment.
    chain_id: str = "cpamm-local"

    # If True, every user-facing operation must carry a BLS signature over its
    # request payload, verified by the service against chain_id before the ledger
    # is asked for a session. If False, only the ledger's authorizer is consulted.
    require_signatures: bool = False

    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not isinstance(self.chain_id, str) or not self.chain_id:
            raise ValueError("chain_id must be a non-empty string")
        if not self.chain_id.isascii():
            raise ValueError("chain_id must be ASCII")
        if not isinstance(self.require_signatures, bool):
            raise ValueError("require_signatures must be a bool")
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_LOG_LEVELS}: {self.log_level!r}")

    @classmethod
    def from_mapping(cls, obj: Mapping[str, Any]) -> "AmmConfig":
        if not isinstance(obj, Mapping):
            raise TypeError("config must be a mapping")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(obj) - known)
        if unknown:
            raise ValueError(f"unknown config keys: {', '.join(unknown)}")
        return cls(**dict(obj))


def load_config(path: Union[str, Path]) -> AmmConfig:
    """Read an ``AmmConfig`` from a YAML file. An empty file yields the defaults."""
    obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if obj is None:
        return AmmConfig()
    return AmmConfig.from_mapping(obj)


def configure_logging(config: AmmConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
