"""
Alias Extractor — collects ``[[Target|alias]]`` aliases from raw note text.

``|`` and ``]]`` are unconditional delimiters: there is no escaping, and a
link without an alias contributes nothing.
"""

import re

# Lazy captures: the target stops at the first "|" or "]]", the alias at "]]".
WIKILINK_PATTERN = re.compile(r"\[\[(.*?)(?:\|(.*?))?\]\]")

AliasMap = dict[str, list[str]]


def extract(text: str) -> AliasMap:
    """
    Map each linked target name to its lower-cased, sorted, de-duplicated
    aliases.  Target names keep their original case (trimmed only).
    """
    found: dict[str, set[str]] = {}
    for match in WIKILINK_PATTERN.finditer(text):
        target = match.group(1).strip()
        alias = (match.group(2) or "").strip()
        if not target or not alias:
            continue
        found.setdefault(target, set()).add(alias.lower())

    return {target: sorted(aliases) for target, aliases in found.items() if aliases}
