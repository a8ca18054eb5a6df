# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Tool configuration - layered options for a transformation run.

Config precedence (later overrides earlier):

    built-in DEFAULTS < environment variables GENRO_URLTOOL_* < constructor arguments

The command line passes its parsed flags as constructor arguments; flags
not given on the command line are passed as None and leave lower layers alone.
"""

from __future__ import annotations

from typing import Any

from genro_toolbox import SmartOptions  # type: ignore[import-untyped]

from .datastructures.query_pairs import MAX_QUERY_PAIRS
from .types import RenderFormat, RenderRequest

__all__ = ["DEFAULTS", "ENV_PREFIX", "ToolConfig"]

ENV_PREFIX = "GENRO_URLTOOL"

DEFAULTS = {
    "verify": False,
    "accept_space": False,
    "json": False,
    "template": None,
    "redirect": None,
    "max_query_pairs": MAX_QUERY_PAIRS,
}


def _tool_opts_spec(
    verify: bool = False,
    accept_space: bool = False,
    json: bool = False,
    template: str | None = None,
    redirect: str | None = None,
    max_query_pairs: int = MAX_QUERY_PAIRS,
) -> None:
    """Reference function for SmartOptions type extraction."""


class ToolConfig:
    """Options shared by every URL of a batch."""

    __slots__ = ("_opts",)

    def __init__(
        self,
        verify: bool | None = None,
        accept_space: bool | None = None,
        json: bool | None = None,
        template: str | None = None,
        redirect: str | None = None,
        max_query_pairs: int | None = None,
    ) -> None:
        self._opts = self._build_config(
            dict(
                verify=verify,
                accept_space=accept_space,
                json=json,
                template=template,
                redirect=redirect,
                max_query_pairs=max_query_pairs,
            )
        )

    def _build_config(self, caller: dict[str, Any]) -> SmartOptions:
        env_opts = SmartOptions(_tool_opts_spec, env=ENV_PREFIX, argv=[])
        caller_opts = SmartOptions(caller, ignore_none=True)
        return SmartOptions(DEFAULTS) + env_opts + caller_opts

    @property
    def verify(self) -> bool:
        """Promote base-URL parse failures to fatal errors."""
        return bool(self._opts["verify"])

    @property
    def accept_space(self) -> bool:
        """Accept spaces in base URLs and encode them."""
        return bool(self._opts["accept_space"])

    @property
    def json(self) -> bool:
        return bool(self._opts["json"])

    @property
    def template(self) -> str | None:
        return self._opts["template"] or None

    @property
    def redirect(self) -> str | None:
        """URL replacing every parsed base URL."""
        return self._opts["redirect"] or None

    @property
    def max_query_pairs(self) -> int:
        value = self._opts["max_query_pairs"]
        return MAX_QUERY_PAIRS if value is None else int(value)

    @property
    def render_request(self) -> RenderRequest:
        """Output selection: JSON wins over a template, a template over plain."""
        if self.json:
            return RenderRequest(RenderFormat.JSON)
        if self.template is not None:
            return RenderRequest(RenderFormat.TEMPLATE, template=self.template)
        return RenderRequest(RenderFormat.PLAIN)

    def __getitem__(self, name: str) -> Any:
        """Proxy bracket access to underlying opts."""
        return self._opts[name]

    def __repr__(self) -> str:
        return (
            f"ToolConfig(verify={self.verify}, accept_space={self.accept_space}, "
            f"format={self.render_request.format.value!r})"
        )
