"""
Deterministic ingestion rules.

Fixed constants shared by every source tier. Deployment-specific values
(paths, sheet id, timeouts) live in settings.py instead.
"""

PLACEHOLDER = "TBA"
HEADER_FALLBACK = "TEST"
PLACEHOLDER_IMAGE_URL = "https://images.unsplash.com/photo-1542751371-adc38448a05e?w=400"

# Column layout: A=image, B=name, C=brand, D=released, E=form factor, F=OS
IMAGE_COLUMN = 0
NAME_COLUMN = 1
BRAND_COLUMN = 2
RELEASE_COLUMN = 3
PERFORMANCE_COLUMN = 4
FIRST_EXTRA_COLUMN = 6
MIN_ROW_CELLS = 6
MAX_COLUMNS = 256

CONTENT_ENTRY = "content.xml"
IMAGE_PREFIX = "Pictures/"
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif")
RELOCATED_NAME_PREFIX = "device_"

MAX_ARCHIVE_RECORDS = 500

CHUNK_ROWS = 100
MAX_REMOTE_ROWS = 1000
REMOTE_LAST_COLUMN = "Z"
REMOTE_WORKERS = 4

CACHE_TTL_SECONDS = 60 * 60
CACHE_CONTROL = "public, max-age=3600"
