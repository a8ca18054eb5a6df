# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""genro-urltool - Declarative URL transformation.

Main components:
    UrlTransformer: runs directives over base URLs, yields rendered output
    Pipeline: applies one variant to one URL
    UrlHandle: URL with component get/set/serialize

Directives:
    parse_set, parse_append, parse_trim, parse_iterate, build_directives
    expand_variants: iterate directive -> list of variants

Renderers:
    PlainRenderer, TemplateRenderer, JsonRenderer

Usage:
    from genro_urltool import UrlTransformer, build_directives

    directives = build_directives(sets=["port=8080"], trims=["query=utm_*"])
    for line in UrlTransformer(directives).run(["https://example.com/?utm_source=x&a=1"]):
        print(line, end="")   # https://example.com:8080/?a=1
"""

__version__ = "0.1.0"

from .config import ToolConfig
from .datastructures import MAX_QUERY_PAIRS, QueryPair, QueryPairs, UrlHandle
from .directives import (
    AppendPath,
    AppendQuery,
    Directive,
    IterateComponent,
    SetComponent,
    TrimQuery,
    build_directives,
    parse_append,
    parse_iterate,
    parse_set,
    parse_trim,
)
from .exceptions import (
    AppendError,
    ConfigError,
    DirectiveError,
    DirectiveFault,
    FlagError,
    IterateError,
    SetError,
    TrimError,
    UrlError,
    UrlParseError,
    UrlSerializeError,
    UrlSetError,
    UrlToolError,
)
from .pipeline import Pipeline
from .renderers import JsonRenderer, PlainRenderer, TemplateRenderer, make_renderer
from .transformer import UrlTransformer
from .types import COMPONENTS, RenderFormat, RenderRequest
from .variants import Variant, expand_variants

__all__ = [
    "__version__",
    # Core
    "UrlTransformer",
    "Pipeline",
    "ToolConfig",
    # Data structures
    "MAX_QUERY_PAIRS",
    "QueryPair",
    "QueryPairs",
    "UrlHandle",
    # Directives
    "AppendPath",
    "AppendQuery",
    "Directive",
    "IterateComponent",
    "SetComponent",
    "TrimQuery",
    "build_directives",
    "parse_append",
    "parse_iterate",
    "parse_set",
    "parse_trim",
    "Variant",
    "expand_variants",
    # Renderers
    "JsonRenderer",
    "PlainRenderer",
    "TemplateRenderer",
    "make_renderer",
    "COMPONENTS",
    "RenderFormat",
    "RenderRequest",
    # Exceptions
    "AppendError",
    "ConfigError",
    "DirectiveError",
    "DirectiveFault",
    "FlagError",
    "IterateError",
    "SetError",
    "TrimError",
    "UrlError",
    "UrlParseError",
    "UrlSerializeError",
    "UrlSetError",
    "UrlToolError",
]
