"""
Settlement engine configuration.

`ReactorConfig` can be built directly, from `FILLREACTOR_*` environment
variables, or from a YAML mapping file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Union

import yaml

from ..core.fees import DEFAULT_MAX_FEE_BPS
from ..core.math import BPS
from ..state.canonical import canonical_address, require_uint


logger = logging.getLogger(__name__)

ENV_PREFIX = "FILLREACTOR_"


@dataclass(frozen=True)
class ReactorConfig:
    # Identity orders must name in `info.reactor`; also the permit spender.
    address: str
    chain_id: str = "fillreactor-local"

    # Fee rows may not exceed this share of the same-token output total.
    max_fee_bps: int = DEFAULT_MAX_FEE_BPS

    # DoS limits (applied before decoding and signature recovery):
    max_batch_size: int = 256
    max_order_bytes: int = 32_000

    def __post_init__(self) -> None:
        object.__setattr__(self, "address", canonical_address(self.address, name="address"))
        if not isinstance(self.chain_id, str) or not self.chain_id:
            raise ValueError("chain_id must be a non-empty str")
        require_uint(self.max_fee_bps, name="max_fee_bps")
        if self.max_fee_bps > BPS:
            raise ValueError(f"max_fee_bps must be <= {BPS}: {self.max_fee_bps}")
        for name in ("max_batch_size", "max_order_bytes"):
            if require_uint(getattr(self, name), name=name) == 0:
                raise ValueError(f"{name} must be positive")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ReactorConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"unknown config keys: {', '.join(unknown)}")
        if "address" not in data:
            raise ValueError("config is missing required key: address")
        return cls(**dict(data))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ReactorConfig":
        env = os.environ if environ is None else environ
        address = env.get(ENV_PREFIX + "ADDRESS")
        if not address:
            raise ValueError(f"{ENV_PREFIX}ADDRESS is not set")
        kwargs: dict[str, Any] = {"address": address}
        chain_id = env.get(ENV_PREFIX + "CHAIN_ID")
        if chain_id:
            kwargs["chain_id"] = chain_id.strip()
        for name in ("max_fee_bps", "max_batch_size", "max_order_bytes"):
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is None:
                continue
            try:
                kwargs[name] = int(raw.strip())
            except ValueError as exc:
                raise ValueError(f"{ENV_PREFIX}{name.upper()} must be an int: {raw!r}") from exc
        return cls(**kwargs)


def load_config(path: Union[str, Path]) -> ReactorConfig:
    """Read a `ReactorConfig` from a YAML mapping; unknown keys are rejected."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: config must be a YAML mapping")
    config = ReactorConfig.from_mapping(data)
    logger.debug("loaded reactor config from %s: %s", path, config)
    return config
