"""Named match profiles: predefined and caller-defined behaviour bundles.

A profile is one layer of the resolver: a partial ``dimension -> behavior``
table plus an optional preprocessing mode.  Markup profiles apply to XML
and HTML; data profiles apply to JSON and YAML.

Predefined markup profiles (pre = preprocessing, norm = normalize)::

                   pre       text   ws     a.pres  a.order a.vals  position comments
    strict         none      strict strict strict  strict  strict  strict   strict
    rendered       none      norm   norm   strict  strict  strict  strict   ignore
    html4          rendered  norm   norm   strict  strict  norm    ignore   ignore
    html5          rendered  norm   norm   strict  strict  strict  ignore   ignore
    spec_friendly  rendered  norm   ignore strict  ignore  norm    ignore   ignore
    content_only   c14n      norm   ignore strict  ignore  norm    ignore   ignore

Predefined data profiles: ``strict``, ``spec_friendly``, ``content_only``.

Custom profiles are built with ``define_profile`` and handed to the
resolver explicitly; there is no process-wide registry.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from semantic_tree_diff.exceptions import ConfigurationError
from semantic_tree_diff.options.dimensions import (
    DocumentFormat,
    MatchBehavior,
    MatchDimension,
    Preprocessing,
    coerce_format,
    coerce_preprocessing,
    formats_sharing,
    validate_setting,
)

__all__ = [
    "DATA_PROFILES",
    "MARKUP_PROFILES",
    "MatchProfile",
    "define_profile",
    "get_profile",
]

_PREPROCESSING_KEY = "preprocessing"


@dataclass(frozen=True, slots=True)
class MatchProfile:
    """A validated, immutable profile.

    Attributes:
        name:          Profile name, as passed to ``match_profile``.
        formats:       Formats the profile may be applied to.
        settings:      Partial ``dimension -> behavior`` table.
        preprocessing: Preprocessing mode the profile selects, if any.
    """

    name: str
    formats: frozenset[DocumentFormat]
    settings: Mapping[MatchDimension, MatchBehavior] = field(
        default_factory=lambda: MappingProxyType({})
    )
    preprocessing: Preprocessing | None = None

    def applies_to(self, fmt: DocumentFormat) -> bool:
        return fmt in self.formats

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "formats": sorted(self.formats),
            "settings": {str(k): str(v) for k, v in self.settings.items()},
            "preprocessing": str(self.preprocessing) if self.preprocessing else None,
        }


def define_profile(
    name: str, fmt: str | DocumentFormat, **settings: str
) -> MatchProfile:
    """Define a custom profile, validating every setting up front.

    Example::

        relaxed = define_profile(
            "relaxed", "xml", text_content="normalize", comments="ignore"
        )
        compare(tree1, tree2, "xml", match_profile=relaxed)

    Args:
        name:     Profile name.
        fmt:      Format the settings are validated against.  The profile
                  applies to the whole family: one defined for ``"xml"``
                  also applies to ``"html"``; dimensions a family member
                  lacks are skipped when the profile is applied there.
        settings: ``dimension=behavior`` keyword pairs, plus an optional
                  ``preprocessing=mode``.

    Returns:
        The frozen ``MatchProfile``.

    Raises:
        ConfigurationError: For an empty name, an unknown format, dimension,
            behaviour or preprocessing mode, or a behaviour outside the
            dimension's domain.
    """
    if not name:
        msg = "Profile name must be a non-empty string"
        raise ConfigurationError(msg)
    document_format = coerce_format(fmt)
    family = formats_sharing(document_format)

    preprocessing: Preprocessing | None = None
    table: dict[MatchDimension, MatchBehavior] = {}
    for key, value in settings.items():
        if key == _PREPROCESSING_KEY:
            preprocessing = coerce_preprocessing(value)
            continue
        dimension, behavior = validate_setting(document_format, key, value)
        table[dimension] = behavior

    return MatchProfile(
        name=name,
        formats=family,
        settings=MappingProxyType(table),
        preprocessing=preprocessing,
    )


def _builtin(
    name: str, fmt: DocumentFormat, preprocessing: str, **settings: str
) -> MatchProfile:
    return define_profile(name, fmt, preprocessing=preprocessing, **settings)


_MARKUP = DocumentFormat.XML
_DATA = DocumentFormat.JSON

MARKUP_PROFILES: MappingProxyType[str, MatchProfile] = MappingProxyType(
    {
        "strict": _builtin(
            "strict",
            _MARKUP,
            "none",
            text_content="strict",
            structural_whitespace="strict",
            attribute_presence="strict",
            attribute_order="strict",
            attribute_values="strict",
            element_position="strict",
            comments="strict",
        ),
        "rendered": _builtin(
            "rendered",
            _MARKUP,
            "none",
            text_content="normalize",
            structural_whitespace="normalize",
            attribute_presence="strict",
            attribute_order="strict",
            attribute_values="strict",
            element_position="strict",
            comments="ignore",
        ),
        "html4": _builtin(
            "html4",
            _MARKUP,
            "rendered",
            text_content="normalize",
            structural_whitespace="normalize",
            attribute_presence="strict",
            attribute_order="strict",
            attribute_values="normalize",
            element_position="ignore",
            comments="ignore",
        ),
        "html5": _builtin(
            "html5",
            _MARKUP,
            "rendered",
            text_content="normalize",
            structural_whitespace="normalize",
            attribute_presence="strict",
            attribute_order="strict",
            attribute_values="strict",
            element_position="ignore",
            comments="ignore",
        ),
        "spec_friendly": _builtin(
            "spec_friendly",
            _MARKUP,
            "rendered",
            text_content="normalize",
            structural_whitespace="ignore",
            attribute_presence="strict",
            attribute_order="ignore",
            attribute_values="normalize",
            element_position="ignore",
            comments="ignore",
        ),
        "content_only": _builtin(
            "content_only",
            _MARKUP,
            "c14n",
            text_content="normalize",
            structural_whitespace="ignore",
            attribute_presence="strict",
            attribute_order="ignore",
            attribute_values="normalize",
            element_position="ignore",
            comments="ignore",
        ),
    }
)

# Comments only exist for YAML, so data profiles leave them to the YAML
# defaults and to explicit overrides.
DATA_PROFILES: MappingProxyType[str, MatchProfile] = MappingProxyType(
    {
        "strict": _builtin(
            "strict",
            _DATA,
            "none",
            text_content="strict",
            structural_whitespace="strict",
            key_order="strict",
        ),
        "spec_friendly": _builtin(
            "spec_friendly",
            _DATA,
            "normalize",
            text_content="strict",
            structural_whitespace="ignore",
            key_order="ignore",
        ),
        "content_only": _builtin(
            "content_only",
            _DATA,
            "normalize",
            text_content="normalize",
            structural_whitespace="ignore",
            key_order="ignore",
        ),
    }
)


def get_profile(
    profile: str | MatchProfile,
    fmt: DocumentFormat,
    extra: Iterable[MatchProfile] = (),
) -> MatchProfile:
    """Look up a profile by name for ``fmt``.

    Caller-supplied ``extra`` profiles take precedence over predefined ones
    with the same name.

    Raises:
        ConfigurationError: If no profile with that name applies to ``fmt``.
    """
    if isinstance(profile, MatchProfile):
        if not profile.applies_to(fmt):
            msg = f"Match profile {profile.name!r} does not apply to format {fmt}"
            raise ConfigurationError(msg)
        return profile

    for candidate in extra:
        if candidate.name == profile and candidate.applies_to(fmt):
            return candidate

    builtins = MARKUP_PROFILES if fmt.is_markup else DATA_PROFILES
    found = builtins.get(str(profile))
    if found is None:
        names = sorted({*builtins, *(p.name for p in extra if p.applies_to(fmt))})
        msg = (
            f"Unknown match profile: {profile!r}. "
            f"Valid profiles for {fmt}: {', '.join(names)}"
        )
        raise ConfigurationError(msg)
    return found
