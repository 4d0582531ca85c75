"""Digest rendering configuration.

Slack ceilings are fixed by the platform; the rest can be tuned through the
environment. Read these as ``config.X`` at call time so tests can override them.
"""

import os

# =============================================================================
# SLACK PLATFORM CEILINGS (bit-exact, do not tune)
# =============================================================================

MAX_BLOCKS_PER_MESSAGE = 50
MAX_FALLBACK_CHARS = 30000
SECTION_TEXT_LIMIT = 3000        # section.text mrkdwn
HEADER_TEXT_LIMIT = 150          # header plain_text
CONTEXT_TEXT_LIMIT = 3000        # context mrkdwn element

# =============================================================================
# RENDERING
# =============================================================================

# Working per-page block budget, scaffold included (headroom under the 50 ceiling)
BLOCK_BUDGET = int(os.environ.get('DIGEST_BLOCK_BUDGET', '45'))

# Per-section body ceiling before the segmenter truncates or splits
SECTION_CHAR_LIMIT = int(os.environ.get('SECTION_CHAR_LIMIT', '2800'))

# Reorder topics by emoji priority before segmenting
SORT_BY_PRIORITY = os.environ.get('SORT_BY_PRIORITY', 'true').lower() in ('1', 'true', 'yes')

# Rewrite [Discord #x] / [Forum ...] labels into Slack links
LINKED_SOURCE_LABELS = os.environ.get('LINKED_SOURCE_LABELS', 'true').lower() in ('1', 'true', 'yes')

DIGEST_TITLE = 'Community Digest'
SUMMARY_LABEL = '*Summary*'
