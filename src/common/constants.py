"""Shared constants for kobo-inbox.

The markers below are the persisted inbox note format. Other tooling matches
on them literally, so changing any spelling is a breaking format change.

For environment-based configuration, use the env module:
    from common.env import env
    folder = env.inbox_folder()
"""

DEFAULT_INBOX_FOLDER = "Kobo-Inboxes"
DEFAULT_INSIGHT_FOLDER = "Kobo-Insights"

# Highlight block
QUOTE_OPENING = "> [!quote]"
RECORD_ID_MARKER = "> <!-- id: {record_id} -->"
ANNOTATION_PREFIX = "> 📝 "

# Control lines
EMPTY_MEMO_LINE = "- [ ] memo:"
INSIGHT_LINK_LINE = "- insight: [[{target}]]"

# Frontmatter keys written by the stats cache
STATS_TOTAL_KEY = "highlights_total"
STATS_INSIGHTS_KEY = "insights_created"
STATS_UPDATED_KEY = "stats_updated_at"

# Storage keys
MAX_FILE_NAME_LENGTH = 120
NOTE_SUFFIX = ".md"

# Kobo content rows with this ContentType are whole books (not chapters)
KOBO_BOOK_CONTENT_TYPE = 6
