"""
Quick Alias — keeps note aliases in sync with the wikilinks that point at them.

Scans notes whose name matches a configurable pattern (daily notes by default)
for ``[[Target|alias]]`` links, and merges every alias into the ``aliases``
front-matter list of the note being linked to.  Runs on file-open and on
debounced edits of the active note.
"""
