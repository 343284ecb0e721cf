# ==============================================================================
# selector_chain.py — Ordered selector fallback chains
# ==============================================================================
# Purpose: Evaluate configured CSS selector chains against parsed HTML
# Sections: Imports, Public exports, Public API
# ==============================================================================

# ==============================================================================
# Imports
# ==============================================================================

# Standard Library -----
from typing import Callable, List, Optional, Sequence, Union

# Third Party -----
from bs4 import BeautifulSoup, Tag

# Sitemap Analyzer ----
from sitemap_analyzer.models.config_models import SelectorRule

# ==============================================================================
# Public exports
# ==============================================================================
__all__ = ["element_value", "first_match", "all_matches", "first_element_list"]

ElementFilter = Callable[[Tag], bool]

# ==============================================================================
# Public API Functions
# ==============================================================================

def element_value(element: Tag, rule: SelectorRule) -> str:
    """
    Read the value a rule asks for from one element.

    Attributes in ``rule.attrs`` are tried in order; the element text is the
    last resort unless the rule turns it off.
    """
    for attr in rule.attrs:
        value = element.get(attr)
        if isinstance(value, list):
            value = " ".join(value)
        if value and value.strip():
            return value.strip()

    if rule.text:
        return element.get_text(" ", strip=True)

    return ""

def first_match(root: Union[BeautifulSoup, Tag], rules: Sequence[SelectorRule]) -> Optional[str]:
    """
    Value of the first element matched by the first rule whose selector matches.

    Only the first matching element of each rule is read. A matching rule ends
    the chain even when its value is empty, unless the rule sets
    ``min_length``: then a shorter value passes the chain on to the next rule.

    Returns:
        The value, or None when the chain ends without one
    """
    for rule in rules:
        element = root.select_one(rule.selector)
        if element is None:
            continue

        value = element_value(element, rule)
        if rule.min_length and len(value) < rule.min_length:
            continue
        return value or None

    return None

def all_matches(
    root: Union[BeautifulSoup, Tag],
    rules: Sequence[SelectorRule],
    element_filter: Optional[ElementFilter] = None,
) -> List[str]:
    """
    Values of every element matched by the first rule whose selector matches.

    Elements rejected by element_filter do not count as matches. A rule with
    ``min_length`` only ends the chain when at least one value reaches it.

    Args:
        root: Document or element to search
        rules: Ordered chain
        element_filter: Optional predicate; rejected elements are skipped

    Returns:
        Non-empty values in document order, [] when the chain ends without any
    """
    for rule in rules:
        elements = root.select(rule.selector)
        if element_filter is not None:
            elements = [element for element in elements if element_filter(element)]
        if not elements:
            continue

        values = []
        for element in elements:
            value = element_value(element, rule)
            if value and len(value) >= rule.min_length:
                values.append(value)

        if values or not rule.min_length:
            return values

    return []

def first_element_list(root: Union[BeautifulSoup, Tag], rules: Sequence[SelectorRule]) -> List[Tag]:
    """Elements matched by the first rule that matches anything."""
    for rule in rules:
        elements = root.select(rule.selector)
        if elements:
            return elements

    return []
