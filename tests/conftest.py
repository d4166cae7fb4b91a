"""Root pytest configuration."""

import logging

# The publisher logs every skipped page at WARNING; keep test output readable.
logging.getLogger("notion_publish").setLevel(logging.ERROR)
