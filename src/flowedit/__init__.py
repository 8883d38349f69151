"""
flowedit: keep a pipeline markup document and its flow graph in sync.

Parses adapter/pipeline markup into a flow structure for rendering, and
turns graph edits back into minimal text replacements.
"""

__version__ = "0.3.0"
