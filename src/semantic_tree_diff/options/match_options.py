"""MatchOptions resolver: layered configuration to a per-dimension table.

Layers, lowest to highest priority:

1. format defaults (``FORMAT_DEFAULTS``)
2. global profile         (``GlobalMatchSettings.profile``)
3. global explicit options (``GlobalMatchSettings.options``)
4. per-call profile       (``match_profile``)
5. per-call preprocessing (``preprocessing``)
6. per-call explicit dimension overrides (``match``), which always win

Every name is validated while resolving; nothing unknown is ever silently
replaced by a default.  The result is a frozen ``ResolvedMatchOptions``
recomputed on every call and never cached globally.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from semantic_tree_diff.exceptions import ConfigurationError
from semantic_tree_diff.options.dimensions import (
    FORMAT_DEFAULTS,
    FORMAT_DIMENSIONS,
    FORMAT_PREPROCESSING,
    DocumentFormat,
    MatchBehavior,
    MatchDimension,
    Preprocessing,
    coerce_behavior,
    coerce_dimension,
    coerce_format,
    coerce_preprocessing,
    validate_setting,
)
from semantic_tree_diff.options.profiles import MatchProfile, get_profile

logger = logging.getLogger(__name__)

__all__ = [
    "GlobalMatchSettings",
    "MatchOptionsResolver",
    "ResolvedMatchOptions",
    "apply_behavior",
    "compact_text",
    "match_text",
    "normalize_text",
    "resolve_match_options",
]

# For str patterns \s also covers the no-break space (U+00A0).
_WS_RUN = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Text comparison under a behaviour
# ---------------------------------------------------------------------------


def compact_text(text: str) -> str:
    """Collapse every whitespace run to a single space (no trimming)."""
    return _WS_RUN.sub(" ", text)


def normalize_text(text: str) -> str:
    """Collapse whitespace runs to one space and trim both ends."""
    return compact_text(text).strip()


def apply_behavior(text: str, behavior: MatchBehavior | str) -> str:
    """Return ``text`` as the given behaviour sees it before comparing."""
    beh = coerce_behavior(behavior)
    if beh == MatchBehavior.STRIP:
        return text.strip()
    if beh == MatchBehavior.COMPACT:
        return compact_text(text)
    if beh == MatchBehavior.NORMALIZE:
        return normalize_text(text)
    return text


def match_text(a: str | None, b: str | None, behavior: MatchBehavior | str) -> bool:
    """Decide whether two texts match under ``behavior``.

    - strict:    ``a == b`` literally
    - strip:     equal after trimming
    - compact:   equal after collapsing whitespace runs to one space
    - normalize: equal after trimming and collapsing
    - ignore:    always True

    ``None`` is treated as the empty string.

    Raises:
        ConfigurationError: If ``behavior`` is not a known behaviour.
    """
    beh = coerce_behavior(behavior)
    if beh == MatchBehavior.IGNORE:
        return True
    return apply_behavior(a or "", beh) == apply_behavior(b or "", beh)


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class GlobalMatchSettings:
    """The caller's global layer, applied beneath every per-call setting.

    Attributes:
        profile: Name of a profile (or a ``MatchProfile``) applied over the
            format defaults.
        options: ``dimension -> behavior`` overrides applied over the
            global profile.
    """

    profile: str | MatchProfile | None = None
    options: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ResolvedMatchOptions:
    """Frozen outcome of resolution for one comparison.

    Attributes:
        format: Document format the table was resolved for.
        behaviors: Complete ``dimension -> behavior`` table for ``format``.
        preprocessing: Preprocessing mode for the adapters.
        profile: Name of the per-call profile applied, if any.
        whitespace_sensitive_elements: Caller whitelist of element names.
        whitespace_insensitive_elements: Caller blacklist of element names.
        respect_xml_space: Whether ``xml:space`` attributes are honoured.
    """

    format: DocumentFormat
    behaviors: Mapping[MatchDimension, MatchBehavior]
    preprocessing: Preprocessing
    profile: str | None = None
    whitespace_sensitive_elements: frozenset[str] = frozenset()
    whitespace_insensitive_elements: frozenset[str] = frozenset()
    respect_xml_space: bool = True

    def behavior_for(self, dimension: MatchDimension | str) -> MatchBehavior:
        """Behaviour configured for ``dimension``.

        Raises:
            ConfigurationError: If the dimension does not exist for this
                format.
        """
        dim = coerce_dimension(dimension)
        try:
            return self.behaviors[dim]
        except KeyError:
            msg = f"Dimension {dim} is not defined for format {self.format}"
            raise ConfigurationError(msg) from None

    def to_dict(self) -> dict[str, object]:
        return {
            "format": str(self.format),
            "preprocessing": str(self.preprocessing),
            "profile": self.profile,
            "behaviors": {str(k): str(v) for k, v in self.behaviors.items()},
            "whitespace_sensitive_elements": sorted(self.whitespace_sensitive_elements),
            "whitespace_insensitive_elements": sorted(
                self.whitespace_insensitive_elements
            ),
            "respect_xml_space": self.respect_xml_space,
        }


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class MatchOptionsResolver:
    """Resolves the six configuration layers into ``ResolvedMatchOptions``.

    Args:
        global_settings: Caller-wide layer.  Defaults to no global profile
            and no global options.
        profiles: Caller-defined profiles made available by name, in
            addition to the predefined ones.
    """

    def __init__(
        self,
        global_settings: GlobalMatchSettings | None = None,
        profiles: Iterable[MatchProfile] = (),
    ) -> None:
        self._global = global_settings or GlobalMatchSettings()
        self._profiles = tuple(profiles)

    def resolve(
        self,
        fmt: DocumentFormat | str,
        *,
        match_profile: str | MatchProfile | None = None,
        match: Mapping[str, str] | None = None,
        preprocessing: Preprocessing | str | None = None,
        whitespace_sensitive_elements: Iterable[str] | None = None,
        whitespace_insensitive_elements: Iterable[str] | None = None,
        respect_xml_space: bool = True,
    ) -> ResolvedMatchOptions:
        """Resolve options for one comparison.

        Args:
            fmt: Document format.
            match_profile: Per-call profile name or ``MatchProfile``.
            match: Per-call ``dimension -> behavior`` overrides.
            preprocessing: Per-call preprocessing mode.
            whitespace_sensitive_elements: Element names whose text keeps its
                whitespace, in addition to the format defaults.
            whitespace_insensitive_elements: Element names removed from the
                format's default sensitive set.
            respect_xml_space: Honour ``xml:space`` on ancestors.

        Raises:
            ConfigurationError: For any unknown format, profile, dimension,
                behaviour or preprocessing mode.
        """
        document_format = coerce_format(fmt)
        behaviors: dict[MatchDimension, MatchBehavior] = dict(
            FORMAT_DEFAULTS[document_format]
        )
        mode = FORMAT_PREPROCESSING[document_format]

        if self._global.profile is not None:
            mode = self._apply_profile(
                behaviors, mode, document_format, self._global.profile
            )
        if self._global.options:
            self._apply_options(behaviors, document_format, self._global.options)

        profile_name: str | None = None
        if match_profile is not None:
            mode = self._apply_profile(behaviors, mode, document_format, match_profile)
            profile_name = (
                match_profile.name
                if isinstance(match_profile, MatchProfile)
                else str(match_profile)
            )

        if preprocessing is not None:
            mode = coerce_preprocessing(preprocessing)

        if match:
            self._apply_options(behaviors, document_format, match)

        resolved = ResolvedMatchOptions(
            format=document_format,
            behaviors=MappingProxyType(behaviors),
            preprocessing=mode,
            profile=profile_name,
            whitespace_sensitive_elements=_names(whitespace_sensitive_elements),
            whitespace_insensitive_elements=_names(whitespace_insensitive_elements),
            respect_xml_space=respect_xml_space,
        )
        logger.debug("resolved match options: %s", resolved.to_dict())
        return resolved

    # ------------------------------------------------------------------
    # Layers
    # ------------------------------------------------------------------

    def _apply_profile(
        self,
        behaviors: dict[MatchDimension, MatchBehavior],
        mode: Preprocessing,
        fmt: DocumentFormat,
        profile: str | MatchProfile,
    ) -> Preprocessing:
        found = get_profile(profile, fmt, self._profiles)
        dimensions = FORMAT_DIMENSIONS[fmt]
        # Family profiles may mention dimensions this member lacks
        # (yaml comments under a json-defined profile and vice versa).
        behaviors.update(
            {dim: beh for dim, beh in found.settings.items() if dim in dimensions}
        )
        return found.preprocessing if found.preprocessing is not None else mode

    @staticmethod
    def _apply_options(
        behaviors: dict[MatchDimension, MatchBehavior],
        fmt: DocumentFormat,
        options: Mapping[str, str],
    ) -> None:
        for name, value in options.items():
            dimension, behavior = validate_setting(fmt, name, value)
            behaviors[dimension] = behavior


def _names(values: Iterable[str] | None) -> frozenset[str]:
    if values is None:
        return frozenset()
    if isinstance(values, str):
        msg = "Element name lists must be iterables of names, not a single string"
        raise ConfigurationError(msg)
    return frozenset(str(v) for v in values)


def resolve_match_options(
    fmt: DocumentFormat | str,
    *,
    global_settings: GlobalMatchSettings | None = None,
    profiles: Iterable[MatchProfile] = (),
    **kwargs: object,
) -> ResolvedMatchOptions:
    """Convenience wrapper: build a resolver and resolve once.

    Keyword arguments are forwarded to ``MatchOptionsResolver.resolve``.
    """
    resolver = MatchOptionsResolver(global_settings, profiles)
    return resolver.resolve(fmt, **kwargs)  # type: ignore[arg-type]
