"""Deterministic document generators for performance benchmarks.

All generators produce fixed, reproducible documents.  No random values.
Three data tiers (10-key flat, 100-key nested, 500-key deeply nested) plus
one markup tier.  Each tier provides an "identical" pair, which the hash
phase matches completely, and an "edited" pair, which leaves work for the
similarity phase.
"""

from __future__ import annotations

from typing import Any

import pytest

from semantic_tree_diff import TreeBuilder, TreeNode


def generate_flat_object(num_keys: int, prefix: str = "key") -> dict[str, Any]:
    """Generate a flat dict with deterministic string values."""
    return {f"{prefix}_{i}": f"value_{i}" for i in range(num_keys)}


def generate_nested_100() -> dict[str, Any]:
    """10 sections x 9 leaf keys, plus the section keys themselves."""
    return {
        f"section_{i}": {f"field_{i}_{j}": f"value_{i}_{j}" for j in range(9)}
        for i in range(10)
    }


def generate_nested_500() -> dict[str, Any]:
    """5 sections x 5 groups x 19 leaves, kept narrow at every level."""
    return {
        f"section_{i}": {
            f"group_{i}_{j}": {
                f"leaf_{i}_{j}_{k}": [k, f"v{k}"] if k % 4 == 0 else k
                for k in range(19)
            }
            for j in range(5)
        }
        for i in range(5)
    }


def _edit(obj: dict[str, Any]) -> dict[str, Any]:
    """Change every third leaf, drop one key and reverse the top level."""
    edited: dict[str, Any] = {}
    for n, (key, value) in enumerate(reversed(list(obj.items()))):
        if n == 1:
            continue
        if isinstance(value, dict):
            edited[key] = _edit(value)
        elif n % 3 == 0:
            edited[key] = f"{value}_changed"
        else:
            edited[key] = value
    return edited


def generate_markup(sections: int = 20, paragraphs: int = 5) -> TreeNode:
    """An XML-like document of sections holding attributed paragraphs."""
    E, T = TreeBuilder.element, TreeBuilder.text
    return E(
        "doc",
        children=[
            E(
                "section",
                {"id": f"s{i}"},
                [
                    E("p", {"class": f"c{j % 3}"}, [T(f"paragraph {i}.{j}")])
                    for j in range(paragraphs)
                ],
            )
            for i in range(sections)
        ],
    )


def _edit_markup(tree: TreeNode) -> TreeNode:
    """Rewrite one paragraph per section and drop the last section."""
    E, T = TreeBuilder.element, TreeBuilder.text
    sections = []
    for section in tree.children[:-1]:
        paragraphs = []
        for n, p in enumerate(section.children):
            text = p.children[0].value or ""
            if n == 0:
                text = f"{text} (revised)"
            paragraphs.append(E("p", dict(p.attributes), [T(text)]))
        sections.append(E("section", dict(section.attributes), paragraphs))
    return E("doc", children=sections)


@pytest.fixture
def pair_10key_identical() -> tuple[dict[str, Any], dict[str, Any]]:
    return generate_flat_object(10), generate_flat_object(10)


@pytest.fixture
def pair_10key_edited() -> tuple[dict[str, Any], dict[str, Any]]:
    return generate_flat_object(10), _edit(generate_flat_object(10))


@pytest.fixture
def pair_100key_identical() -> tuple[dict[str, Any], dict[str, Any]]:
    return generate_nested_100(), generate_nested_100()


@pytest.fixture
def pair_100key_edited() -> tuple[dict[str, Any], dict[str, Any]]:
    return generate_nested_100(), _edit(generate_nested_100())


@pytest.fixture
def pair_500key_identical() -> tuple[dict[str, Any], dict[str, Any]]:
    return generate_nested_500(), generate_nested_500()


@pytest.fixture
def pair_500key_edited() -> tuple[dict[str, Any], dict[str, Any]]:
    return generate_nested_500(), _edit(generate_nested_500())


@pytest.fixture
def pair_markup_edited() -> tuple[TreeNode, TreeNode]:
    tree = generate_markup()
    return tree, _edit_markup(generate_markup())
