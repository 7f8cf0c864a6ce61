"""Pipeline for chaining multiple fixers on a single source string."""

from __future__ import annotations

from swiftguard.fixers.fmt001 import fix_colon_spacing
from swiftguard.fixers.mut001 import fix_prefer_let
from swiftguard.types import SwiftGuardConfig


def fix_all(source: str, *, config: SwiftGuardConfig) -> str:
    """Apply all str-to-str fixers for enabled rules, in dependency order.

    Order matters:
    1. MUT001: ``var`` to ``let``, same length so later columns hold
    2. FMT001: declaration colon spacing
    """
    if config.is_rule_enabled("MUT001"):
        source = fix_prefer_let(source, config=config)
    if config.is_rule_enabled("FMT001"):
        source = fix_colon_spacing(source, config=config)
    return source
