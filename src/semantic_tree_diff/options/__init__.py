"""options subpackage: dimensions, profiles, resolution and whitespace rules.

Example::

    from semantic_tree_diff.options import MatchOptionsResolver, define_profile

    relaxed = define_profile("relaxed", "xml", comments="ignore")
    resolver = MatchOptionsResolver(profiles=[relaxed])
    options = resolver.resolve("xml", match_profile="relaxed")
    options.behavior_for("comments")   # MatchBehavior.IGNORE
"""

from __future__ import annotations

from semantic_tree_diff.options.dimensions import (
    FORMAT_DEFAULTS,
    DocumentFormat,
    MatchBehavior,
    MatchDimension,
    Preprocessing,
)
from semantic_tree_diff.options.match_options import (
    GlobalMatchSettings,
    MatchOptionsResolver,
    ResolvedMatchOptions,
    match_text,
    normalize_text,
    resolve_match_options,
)
from semantic_tree_diff.options.profiles import MatchProfile, define_profile
from semantic_tree_diff.options.whitespace import WhitespaceSensitivity

__all__ = [
    "FORMAT_DEFAULTS",
    "DocumentFormat",
    "GlobalMatchSettings",
    "MatchBehavior",
    "MatchDimension",
    "MatchOptionsResolver",
    "MatchProfile",
    "Preprocessing",
    "ResolvedMatchOptions",
    "WhitespaceSensitivity",
    "define_profile",
    "match_text",
    "normalize_text",
    "resolve_match_options",
]
