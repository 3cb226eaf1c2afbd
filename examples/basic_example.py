#!/usr/bin/env python3
"""
Example script demonstrating the usage of flagstruct.

Run it with arguments such as:

    python basic_example.py -name=nightly -db-user=root --workers=8 -mode=safe
"""

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional

from flagstruct import FlagStructError, decode


class LogLevel:
    """Log level that decodes itself from a level name."""

    def __init__(self) -> None:
        self.level = logging.INFO

    def decode(self, value: str) -> None:
        level = logging.getLevelName(value.upper())
        if not isinstance(level, int):
            raise ValueError(f"unknown log level: {value}")
        self.level = level


@dataclass
class DatabaseConfig:
    """Connection settings, resolved against the same arguments."""

    host: str = field(default="", metadata={"flag": "db-host,default=127.0.0.1"})
    port: int = field(default=0, metadata={"flag": "db-port,default=5432"})
    user: str = field(default="", metadata={"flag": "db-user,required"})
    timeout: timedelta = field(
        default=timedelta(0), metadata={"flag": "db-timeout,default=5s"}
    )


@dataclass
class SimulationConfig:
    """Configuration for simulation parameters."""

    name: str = field(default="", metadata={"flag": "name,required"})
    workers: int = field(default=0, metadata={"flag": "workers,default=4"})
    mode: str = field(default="", metadata={"flag": "mode,default=fast,allowed=fast;safe"})
    seeds: list[int] = field(default_factory=list, metadata={"flag": "seeds"})
    log_level: LogLevel = field(default_factory=LogLevel, metadata={"flag": "log-level"})
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    replica: Optional[DatabaseConfig] = None


def main() -> None:
    """Main function demonstrating the decoder."""
    config = SimulationConfig()
    try:
        decode(config)
    except FlagStructError as e:
        raise SystemExit(str(e))

    logging.basicConfig(level=config.log_level.level)

    print("Parsed Configuration:")
    print("-" * 30)
    print(f"Simulation Name: {config.name}")
    print(f"Workers: {config.workers}")
    print(f"Mode: {config.mode}")
    print(f"Seeds: {config.seeds}")
    print(f"Log Level: {logging.getLevelName(config.log_level.level)}")
    print(f"Database: {config.database.user}@{config.database.host}:{config.database.port}")
    print(f"Database Timeout: {config.database.timeout}")


if __name__ == "__main__":
    main()
