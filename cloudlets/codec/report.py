"""
Deterministic rendering of validation error trees.

An error tree is a dict keyed by field name whose values are either a
message or a nested tree. A nested tree keyed by integers describes the
elements of a list field and renders as one ``Field[i]: {`` block per
element. Keys are sorted alphabetically, element indices numerically, so
the same errors always render to the same text.

Example:
    >>> tree = {"MatchRules": {0: {"Type": "cannot be blank"}}}
    >>> print(format_validation_errors(tree))
    MatchRules[0]: {
    	Type: cannot be blank
    }
"""

from __future__ import annotations

from typing import Any

ErrorTree = dict[Any, Any]


def prune_errors(errors: ErrorTree) -> ErrorTree:
    """Drop keys whose message is empty or whose nested tree holds no errors."""
    pruned: ErrorTree = {}
    for key, value in errors.items():
        if isinstance(value, dict):
            value = prune_errors(value)
        if value:
            pruned[key] = value
    return pruned


def _is_indexed(tree: ErrorTree) -> bool:
    return bool(tree) and all(isinstance(key, int) for key in tree)


def _render(errors: ErrorTree, depth: int) -> list[str]:
    indent = "\t" * depth
    lines: list[str] = []
    for key in sorted(errors):
        value = errors[key]
        if not isinstance(value, dict):
            lines.append(f"{indent}{key}: {value}")
        elif _is_indexed(value):
            for index in sorted(value):
                if not isinstance(value[index], dict):
                    lines.append(f"{indent}{key}[{index}]: {value[index]}")
                    continue
                lines.append(f"{indent}{key}[{index}]: {{")
                lines.extend(_render(value[index], depth + 1))
                lines.append(f"{indent}}}")
        else:
            lines.append(f"{indent}{key}: {{")
            lines.extend(_render(value, depth + 1))
            lines.append(f"{indent}}}")
    return lines


def format_validation_errors(errors: ErrorTree) -> str:
    """
    Render an error tree as the multi-line report used in ValidationError.

    Args:
        errors: Field name -> message or nested tree

    Returns:
        The report, without a trailing newline; empty string when there are
        no errors
    """
    return "\n".join(_render(prune_errors(errors), 0))
