"""Dimensions, behaviours, formats and preprocessing modes.

All tables in this module are read-only ``MappingProxyType`` constants; the
resolver copies what it needs and never mutates them.

Format defaults (a dimension absent from a column does not exist for that
format and is rejected when configured):

    dimension                xml        html       json    yaml
    text_content             strict     normalize  strict  strict
    structural_whitespace    strict     normalize  ignore  ignore
    attribute_presence       strict     strict     -       -
    attribute_order          ignore     ignore     -       -
    attribute_values         strict     strict     -       -
    element_position         strict     ignore     strict  strict
    element_structure        strict     strict     strict  strict
    comments                 strict     ignore     -       ignore
    namespace_uri            strict     strict     -       -
    namespace_declarations   normalize  ignore     -       -
    key_order                -          -          ignore  strict
    preprocessing            none       rendered   none    none
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum, auto
from types import MappingProxyType
from typing import TypeVar

from semantic_tree_diff.exceptions import ConfigurationError

__all__ = [
    "DIMENSION_BEHAVIORS",
    "FORMAT_DEFAULTS",
    "FORMAT_DIMENSIONS",
    "FORMAT_PREPROCESSING",
    "DocumentFormat",
    "MatchBehavior",
    "MatchDimension",
    "Preprocessing",
    "coerce_behavior",
    "coerce_dimension",
    "coerce_format",
    "coerce_preprocessing",
    "formats_sharing",
    "iter_dimensions",
    "validate_setting",
]


class MatchDimension(StrEnum):
    """A named comparison axis with its own configurable behaviour."""

    TEXT_CONTENT = auto()
    STRUCTURAL_WHITESPACE = auto()
    ATTRIBUTE_PRESENCE = auto()
    ATTRIBUTE_ORDER = auto()
    ATTRIBUTE_VALUES = auto()
    ELEMENT_POSITION = auto()
    ELEMENT_STRUCTURE = auto()
    COMMENTS = auto()
    NAMESPACE_URI = auto()
    NAMESPACE_DECLARATIONS = auto()
    KEY_ORDER = auto()


class MatchBehavior(StrEnum):
    """How differences along a dimension are judged.

    - STRICT:    exact match required
    - STRIP:     leading/trailing whitespace ignored
    - COMPACT:   whitespace runs collapsed to one space
    - NORMALIZE: strip + compact, then compare
    - IGNORE:    never normative
    """

    STRICT = auto()
    STRIP = auto()
    COMPACT = auto()
    NORMALIZE = auto()
    IGNORE = auto()


class DocumentFormat(StrEnum):
    XML = auto()
    HTML = auto()
    JSON = auto()
    YAML = auto()

    @property
    def is_markup(self) -> bool:
        return self in (DocumentFormat.XML, DocumentFormat.HTML)


class Preprocessing(StrEnum):
    """Preprocessing mode recorded for the parsing adapters.

    The core never reparses; adapters read the resolved mode and prepare
    trees accordingly.
    """

    NONE = auto()
    C14N = auto()
    NORMALIZE = auto()
    FORMAT = auto()
    RENDERED = auto()


_D = MatchDimension
_B = MatchBehavior

_BINARY = frozenset({_B.STRICT, _B.IGNORE})
_NAMESPACE = frozenset({_B.STRICT, _B.NORMALIZE, _B.IGNORE})
_TEXTUAL = frozenset(MatchBehavior)

# Behaviours each dimension accepts.
DIMENSION_BEHAVIORS: MappingProxyType[MatchDimension, frozenset[MatchBehavior]] = (
    MappingProxyType(
        {
            _D.TEXT_CONTENT: _TEXTUAL,
            _D.STRUCTURAL_WHITESPACE: _TEXTUAL,
            _D.ATTRIBUTE_VALUES: _TEXTUAL,
            _D.COMMENTS: _TEXTUAL,
            _D.ATTRIBUTE_PRESENCE: _BINARY,
            _D.ATTRIBUTE_ORDER: _BINARY,
            _D.ELEMENT_POSITION: _BINARY,
            _D.ELEMENT_STRUCTURE: _BINARY,
            _D.KEY_ORDER: _BINARY,
            _D.NAMESPACE_URI: _NAMESPACE,
            _D.NAMESPACE_DECLARATIONS: _NAMESPACE,
        }
    )
)

_XML_DEFAULTS = MappingProxyType(
    {
        _D.TEXT_CONTENT: _B.STRICT,
        _D.STRUCTURAL_WHITESPACE: _B.STRICT,
        _D.ATTRIBUTE_PRESENCE: _B.STRICT,
        _D.ATTRIBUTE_ORDER: _B.IGNORE,
        _D.ATTRIBUTE_VALUES: _B.STRICT,
        _D.ELEMENT_POSITION: _B.STRICT,
        _D.ELEMENT_STRUCTURE: _B.STRICT,
        _D.COMMENTS: _B.STRICT,
        _D.NAMESPACE_URI: _B.STRICT,
        _D.NAMESPACE_DECLARATIONS: _B.NORMALIZE,
    }
)

_HTML_DEFAULTS = MappingProxyType(
    {
        _D.TEXT_CONTENT: _B.NORMALIZE,
        _D.STRUCTURAL_WHITESPACE: _B.NORMALIZE,
        _D.ATTRIBUTE_PRESENCE: _B.STRICT,
        _D.ATTRIBUTE_ORDER: _B.IGNORE,
        _D.ATTRIBUTE_VALUES: _B.STRICT,
        _D.ELEMENT_POSITION: _B.IGNORE,
        _D.ELEMENT_STRUCTURE: _B.STRICT,
        _D.COMMENTS: _B.IGNORE,
        _D.NAMESPACE_URI: _B.STRICT,
        _D.NAMESPACE_DECLARATIONS: _B.IGNORE,
    }
)

_JSON_DEFAULTS = MappingProxyType(
    {
        _D.TEXT_CONTENT: _B.STRICT,
        _D.STRUCTURAL_WHITESPACE: _B.IGNORE,
        _D.ELEMENT_POSITION: _B.STRICT,
        _D.ELEMENT_STRUCTURE: _B.STRICT,
        _D.KEY_ORDER: _B.IGNORE,
    }
)

_YAML_DEFAULTS = MappingProxyType(
    {
        _D.TEXT_CONTENT: _B.STRICT,
        _D.STRUCTURAL_WHITESPACE: _B.IGNORE,
        _D.ELEMENT_POSITION: _B.STRICT,
        _D.ELEMENT_STRUCTURE: _B.STRICT,
        _D.COMMENTS: _B.IGNORE,
        _D.KEY_ORDER: _B.STRICT,
    }
)

FORMAT_DEFAULTS: MappingProxyType[
    DocumentFormat, MappingProxyType[MatchDimension, MatchBehavior]
] = MappingProxyType(
    {
        DocumentFormat.XML: _XML_DEFAULTS,
        DocumentFormat.HTML: _HTML_DEFAULTS,
        DocumentFormat.JSON: _JSON_DEFAULTS,
        DocumentFormat.YAML: _YAML_DEFAULTS,
    }
)

# The dimensions that exist for each format are exactly its default keys.
FORMAT_DIMENSIONS: MappingProxyType[DocumentFormat, frozenset[MatchDimension]] = (
    MappingProxyType({fmt: frozenset(table) for fmt, table in FORMAT_DEFAULTS.items()})
)

FORMAT_PREPROCESSING: MappingProxyType[DocumentFormat, Preprocessing] = (
    MappingProxyType(
        {
            DocumentFormat.XML: Preprocessing.NONE,
            DocumentFormat.HTML: Preprocessing.RENDERED,
            DocumentFormat.JSON: Preprocessing.NONE,
            DocumentFormat.YAML: Preprocessing.NONE,
        }
    )
)


# ---------------------------------------------------------------------------
# Coercion: accept enum members or their string values, fail fast otherwise
# ---------------------------------------------------------------------------

_E = TypeVar("_E", bound=StrEnum)


def _coerce(enum_cls: type[_E], value: object, what: str) -> _E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value))
    except ValueError:
        valid = ", ".join(member.value for member in enum_cls)
        msg = f"Unknown {what}: {value!r}. Valid {what}s: {valid}"
        raise ConfigurationError(msg) from None


def coerce_dimension(value: object) -> MatchDimension:
    return _coerce(MatchDimension, value, "match dimension")


def coerce_behavior(value: object) -> MatchBehavior:
    return _coerce(MatchBehavior, value, "match behavior")


def coerce_format(value: object) -> DocumentFormat:
    return _coerce(DocumentFormat, value, "format")


def coerce_preprocessing(value: object) -> Preprocessing:
    return _coerce(Preprocessing, value, "preprocessing option")


def validate_setting(
    fmt: DocumentFormat, dimension: object, behavior: object
) -> tuple[MatchDimension, MatchBehavior]:
    """Coerce and check one ``dimension -> behavior`` setting for ``fmt``.

    Raises:
        ConfigurationError: If the dimension is unknown or does not exist
            for ``fmt``, or the behaviour is unknown or outside the
            dimension's domain.
    """
    dim = coerce_dimension(dimension)
    beh = coerce_behavior(behavior)
    if dim not in FORMAT_DIMENSIONS[fmt]:
        valid = ", ".join(sorted(FORMAT_DIMENSIONS[fmt]))
        msg = (
            f"Unknown match dimension for {fmt}: {dim}. "
            f"Valid dimensions: {valid}"
        )
        raise ConfigurationError(msg)
    allowed = DIMENSION_BEHAVIORS[dim]
    if beh not in allowed:
        valid = ", ".join(b.value for b in MatchBehavior if b in allowed)
        msg = (
            f"Invalid behavior {beh!s} for dimension {dim!s}. "
            f"Valid behaviors: {valid}"
        )
        raise ConfigurationError(msg)
    return dim, beh


def formats_sharing(fmt: DocumentFormat) -> frozenset[DocumentFormat]:
    """The format family of ``fmt``: markup (xml, html) or data (json, yaml)."""
    if fmt.is_markup:
        return frozenset({DocumentFormat.XML, DocumentFormat.HTML})
    return frozenset({DocumentFormat.JSON, DocumentFormat.YAML})


def iter_dimensions(fmt: DocumentFormat) -> Iterable[MatchDimension]:
    """Dimensions of ``fmt`` in declaration order."""
    return (d for d in MatchDimension if d in FORMAT_DIMENSIONS[fmt])
