"""MatcherConfig: frozen parameters of the two-phase tree matcher.

The similarity phase scores a candidate pair as a weighted sum of four
terms, each in [0, 1]:

    score = w_attributes * attribute overlap
          + w_text       * text similarity
          + w_subtree    * subtree-signature overlap
          + w_position   * position proximity

Pairs scoring below ``threshold`` are never matched.
"""

from __future__ import annotations

from dataclasses import dataclass

from semantic_tree_diff.exceptions import ConfigurationError

__all__ = ["MatcherConfig"]


@dataclass(frozen=True, slots=True)
class MatcherConfig:
    """Immutable configuration for ``TreeMatcher``.

    Attributes:
        w_attributes: Weight of attribute-set overlap (Jaccard over
            name/value pairs).
        w_text: Weight of text-content similarity.
        w_subtree: Weight of subtree-signature overlap.
        w_position: Weight of document-position proximity.  Biases the
            assignment toward non-crossing pairs.
        threshold: Minimum score for a similarity-phase match, in [0, 1].
        enable_hash_matching: Run the signature-bucketing phase.
        enable_similarity_matching: Run the scored assignment phase.
        enable_propagation: Re-run the hash phase below pairs found by the
            similarity phase.
        text_cache_size: Capacity of the per-matcher text-similarity cache.
    """

    w_attributes: float = 0.3
    w_text: float = 0.3
    w_subtree: float = 0.25
    w_position: float = 0.15
    threshold: float = 0.5
    enable_hash_matching: bool = True
    enable_similarity_matching: bool = True
    enable_propagation: bool = True
    text_cache_size: int = 1024

    def __post_init__(self) -> None:
        weights = {
            "w_attributes": self.w_attributes,
            "w_text": self.w_text,
            "w_subtree": self.w_subtree,
            "w_position": self.w_position,
        }
        for name, weight in weights.items():
            if not 0.0 <= weight <= 1.0:
                msg = f"{name} must be in [0, 1], got {weight}"
                raise ConfigurationError(msg)
        total = sum(weights.values())
        if abs(total - 1.0) >= 1e-9:
            msg = f"matcher weights must sum to 1.0, got {total}"
            raise ConfigurationError(msg)
        if not 0.0 <= self.threshold <= 1.0:
            msg = f"threshold must be in [0, 1], got {self.threshold}"
            raise ConfigurationError(msg)
        if self.text_cache_size < 1:
            msg = f"text_cache_size must be >= 1, got {self.text_cache_size}"
            raise ConfigurationError(msg)
