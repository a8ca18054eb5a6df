# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Tests for ToolConfig."""

from genro_urltool.config import DEFAULTS, ToolConfig
from genro_urltool.datastructures import MAX_QUERY_PAIRS
from genro_urltool.types import RenderFormat, RenderRequest


class TestToolConfig:
    """Tests for ToolConfig."""

    def test_defaults(self) -> None:
        config = ToolConfig()
        assert config.verify is False
        assert config.accept_space is False
        assert config.json is False
        assert config.template is None
        assert config.redirect is None
        assert config.max_query_pairs == MAX_QUERY_PAIRS == DEFAULTS["max_query_pairs"]

    def test_explicit_values(self) -> None:
        config = ToolConfig(
            verify=True,
            accept_space=True,
            redirect="https://example.com/",
            max_query_pairs=5,
        )
        assert config.verify is True
        assert config.accept_space is True
        assert config.redirect == "https://example.com/"
        assert config.max_query_pairs == 5

    def test_bracket_access(self) -> None:
        assert ToolConfig(verify=True)["verify"] is True

    def test_plain_request(self) -> None:
        assert ToolConfig().render_request == RenderRequest(RenderFormat.PLAIN)

    def test_template_request(self) -> None:
        request = ToolConfig(template="{host}").render_request
        assert request.format is RenderFormat.TEMPLATE
        assert request.template == "{host}"

    def test_json_wins(self) -> None:
        request = ToolConfig(json=True, template="{host}").render_request
        assert request.format is RenderFormat.JSON

    def test_repr(self) -> None:
        assert "format='json'" in repr(ToolConfig(json=True))


class TestEnvironment:
    """GENRO_URLTOOL_* variables sit between the defaults and explicit arguments."""

    def test_env_values(self, monkeypatch) -> None:
        monkeypatch.setenv("GENRO_URLTOOL_VERIFY", "true")
        monkeypatch.setenv("GENRO_URLTOOL_REDIRECT", "https://example.org/")
        monkeypatch.setenv("GENRO_URLTOOL_MAX_QUERY_PAIRS", "7")
        config = ToolConfig()
        assert config.verify is True
        assert config.redirect == "https://example.org/"
        assert config.max_query_pairs == 7

    def test_arguments_override_env(self, monkeypatch) -> None:
        monkeypatch.setenv("GENRO_URLTOOL_REDIRECT", "https://example.org/")
        monkeypatch.setenv("GENRO_URLTOOL_MAX_QUERY_PAIRS", "7")
        config = ToolConfig(redirect="https://other.org/", max_query_pairs=3)
        assert config.redirect == "https://other.org/"
        assert config.max_query_pairs == 3

    def test_unset_arguments_keep_env(self, monkeypatch) -> None:
        """None arguments, as passed by the CLI for absent flags, leave the env value."""
        monkeypatch.setenv("GENRO_URLTOOL_ACCEPT_SPACE", "true")
        assert ToolConfig(accept_space=None).accept_space is True
