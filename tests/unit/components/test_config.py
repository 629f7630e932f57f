from pathlib import Path

import pytest
from loguru import logger

from axmltree.config import DEFAULT_LOG_LEVEL, ParserConfig, load_config
from axmltree.log import configure_logging


class TestLoadConfig:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("AXMLTREE_PUBLIC_XML", raising=False)
        monkeypatch.delenv("AXMLTREE_LOG_LEVEL", raising=False)
        assert load_config() == ParserConfig(public_xml=None, log_level=DEFAULT_LOG_LEVEL)

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("AXMLTREE_PUBLIC_XML", "/sdk/public.xml")
        monkeypatch.setenv("AXMLTREE_LOG_LEVEL", "debug")
        config = load_config()
        assert config.public_xml == Path("/sdk/public.xml")
        assert config.log_level == "DEBUG"


@pytest.fixture
def captured():
    messages = []
    yield messages
    logger.remove()


class TestConfigureLogging:
    def test_single_handler_with_level(self, captured):
        configure_logging("WARNING", fmt="{level}:{message}", sink=captured.append)
        logger.info("hidden")
        logger.warning("shown")
        assert [m.strip() for m in captured] == ["WARNING:shown"]

    def test_level_from_environment(self, captured, monkeypatch):
        monkeypatch.setenv("AXMLTREE_LOG_LEVEL", "error")
        configure_logging(fmt="{message}", sink=captured.append)
        logger.warning("hidden")
        logger.error("shown")
        assert [m.strip() for m in captured] == ["shown"]
