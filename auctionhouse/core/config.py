"""
Engine configuration parameters.

Defines the anti-snipe timing rules, reputation economics and
operational limits.
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_PREFIX = "AUCTIONHOUSE_"


@dataclass
class EngineConfig:
    """Engine-wide configuration parameters"""

    # Anti-snipe parameters (seconds)
    extension_threshold: int = 600  # Bids with less than 10 minutes left extend the deadline
    extension_grant: int = 300  # New deadline is bid time + 5 minutes

    # Reputation
    bid_reputation_points: int = 10  # Flat points per accepted bid

    # Limits
    max_name_length: int = 256
    max_description_length: int = 1024
    default_page_size: int = 50

    # Logging
    log_level: str = "INFO"
    log_dir: Path = Path("logs")


def load_config(env_file: Optional[str] = None) -> EngineConfig:
    """
    Load configuration from the environment or use defaults.

    Values are read from AUCTIONHOUSE_<FIELD> variables, e.g.
    AUCTIONHOUSE_EXTENSION_THRESHOLD=900.

    Args:
        env_file: Optional path to a .env file to load first

    Returns:
        EngineConfig instance
    """
    if env_file:
        load_dotenv(env_file, override=False)

    overrides = {}
    for f in fields(EngineConfig):
        raw = os.environ.get(f"{ENV_PREFIX}{f.name.upper()}")
        if raw is None:
            continue
        if f.type is int:
            try:
                overrides[f.name] = int(raw)
            except ValueError:
                raise ValueError(f"{ENV_PREFIX}{f.name.upper()} must be an integer, got {raw!r}")
        elif f.type is Path:
            overrides[f.name] = Path(raw)
        else:
            overrides[f.name] = raw

    return EngineConfig(**overrides)
