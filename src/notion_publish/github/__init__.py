# ABOUTME: GitHub integration package.
# ABOUTME: Exports the REST client, batch commit and single-file write operations.

from .client import GitHubClient, Lookup, LookupStatus
from .commits import OutputFile, commit_files
from .files import file_exists, write_file

__all__ = [
    "GitHubClient",
    "Lookup",
    "LookupStatus",
    "OutputFile",
    "commit_files",
    "file_exists",
    "write_file",
]
