"""
Repository Inspector for the commit summary action.

This service is responsible for:
- Reading the subject, hash and file changes of the latest commit
- Detecting the current branch, including detached HEADs
- Reading the origin remote URL for repository identification
"""

__version__ = "1.0.0"
__description__ = "Local Git commit extraction"
