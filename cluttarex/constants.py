"""
Constants for Cluttarex.

These constants are used by the extraction stages for sensible defaults.
The heuristic thresholds below were tuned by hand against real pages; they
are kept at fixed values for compatibility with existing readers, not
because they are known to be optimal.
"""

# Network
DEFAULT_REQUEST_TIMEOUT = 10
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; Cluttarex/1.0;)"

# Server
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000

# Assembler
NO_TITLE = "No Title"
WORDS_PER_MINUTE = 225

# Clutter remover: phrase matches only apply to short blocks
MAX_PHRASE_BLOCK_LENGTH = 500

# Link-density filter (tunable)
LINK_DENSITY_MIN_LINKS = 5
LINK_DENSITY_MIN_CHARS_PER_LINK = 30

# Image normalizer (tunable, in declared pixels)
MIN_IMAGE_WIDTH = 200
MIN_IMAGE_HEIGHT = 150
