# ABOUTME: Publishes Notion database pages to a GitHub repository as MDX files.
# ABOUTME: Package version lives here.

__version__ = "0.1.0"
