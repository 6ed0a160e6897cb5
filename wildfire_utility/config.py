#!/usr/bin/env python3
"""
Configuration management for the WildFire utility
All configuration values can be set via environment variables and overridden on the command line.
"""

import os
from typing import Optional
from dataclasses import dataclass

DEFAULT_HOST = "https://wildfire.paloaltonetworks.com/"


@dataclass
class WildFireConfig:
    """WildFire API configuration"""
    host: str = DEFAULT_HOST
    api_key: Optional[str] = None
    timeout: int = 60
    retry_attempts: int = 0
    retry_delay: int = 2  # seconds
    verify_tls: bool = True

    @classmethod
    def from_env(cls) -> 'WildFireConfig':
        """Load from environment variables"""
        return cls(
            host=os.getenv("WILDFIRE_HOST", DEFAULT_HOST),
            api_key=os.getenv("WILDFIRE_API_KEY"),
            timeout=int(os.getenv("WILDFIRE_TIMEOUT", "60")),
            retry_attempts=int(os.getenv("WILDFIRE_RETRY_ATTEMPTS", "0")),
            retry_delay=int(os.getenv("WILDFIRE_RETRY_DELAY", "2")),
            verify_tls=os.getenv("WILDFIRE_VERIFY_TLS", "true").lower() == "true"
        )

    @property
    def base_url(self) -> str:
        """Host with exactly one trailing slash, so endpoint paths join cleanly"""
        return self.host.rstrip("/") + "/"


@dataclass
class OutputConfig:
    """Result and log output configuration"""
    csv_file: Optional[str] = None
    pdf_file: Optional[str] = None
    log_level: str = "WARNING"
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'OutputConfig':
        """Load from environment variables"""
        return cls(
            csv_file=os.getenv("WILDFIRE_CSV"),
            pdf_file=os.getenv("WILDFIRE_PDF"),
            log_level=os.getenv("LOG_LEVEL", "WARNING"),
            log_file=os.getenv("LOG_FILE")
        )


class Config:
    """Main configuration class"""
    def __init__(self):
        self.wildfire = WildFireConfig.from_env()
        self.output = OutputConfig.from_env()

    @classmethod
    def load(cls) -> 'Config':
        """Load configuration from environment"""
        return cls()
