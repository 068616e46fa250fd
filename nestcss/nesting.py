"""Flattening of nested rules.

    .card { color: red; .title { color: blue; } }

becomes

    .card { color: red; }
    .card .title { color: blue; }
"""

from __future__ import annotations
import logging
from copy import deepcopy
from dataclasses import replace

from nestcss.css.nodes import Rule, Selector, StyleSheet

__all__ = ["nest_selector", "raise_nested_rules"]

logger = logging.getLogger(__name__)

def nest_selector(selector: Selector, nested: Selector) -> Selector:
    """Return a copy of `selector` with `nested` appended as a descendant of its last compound.

    Neither argument is modified.
    """
    class_names = list(selector.class_names)
    if selector.descendant is not None:
        return replace(selector, class_names=class_names, descendant=nest_selector(selector.descendant, nested))
    if selector.child is not None:
        return replace(selector, class_names=class_names, child=nest_selector(selector.child, nested))
    return replace(selector, class_names=class_names, descendant=deepcopy(nested))

def _only_nests(rule: Rule) -> bool:
    return bool(rule.nested_rules) and not rule.declarations

def _raise_subrules(rule: Rule, raised: list[Rule]):
    """Move the nested rules of `rule` (and theirs, depth first) into `raised`."""
    nested_rules, rule.nested_rules = rule.nested_rules or [], None
    for nested_rule in nested_rules:
        nested_rule.selectors = [
            nest_selector(selector, nested_selector)
            for selector in rule.selectors
            for nested_selector in nested_rule.selectors
        ]
        keep = not _only_nests(nested_rule)
        _raise_subrules(nested_rule, raised)
        if keep:
            raised.append(nested_rule)

def raise_nested_rules(stylesheet: StyleSheet) -> StyleSheet:
    """Unnest every rule in `stylesheet` in place.

    Raised rules are appended after the existing entries. Rules whose only content was
    nested rules are removed since they would render as empty blocks; rules written empty in
    the source are kept.
    """
    raised: list[Rule] = []
    entries = []
    for entry in stylesheet.entries:
        if isinstance(entry, Rule):
            keep = not _only_nests(entry)
            _raise_subrules(entry, raised)
            if not keep:
                continue
        entries.append(entry)

    entries.extend(raised)
    logger.debug("Raised %d nested rules", len(raised))
    stylesheet.entries = entries
    return stylesheet
