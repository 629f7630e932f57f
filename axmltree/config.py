"""
Configuration for axmltree.

Loaded from:
1. Defaults (this file)
2. Environment variables (AXMLTREE_*) override defaults
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

DEFAULT_LOG_LEVEL = "WARNING"


@dataclass
class ParserConfig:
    """Parser settings."""
    public_xml: Union[Path, None] = None  # framework public.xml for attribute names
    log_level: str = DEFAULT_LOG_LEVEL


def load_config() -> ParserConfig:
    """Return defaults with environment overrides applied."""
    config = ParserConfig()

    public_xml = os.environ.get("AXMLTREE_PUBLIC_XML")
    if public_xml:
        config.public_xml = Path(public_xml)

    log_level = os.environ.get("AXMLTREE_LOG_LEVEL")
    if log_level:
        config.log_level = log_level.upper()

    return config
