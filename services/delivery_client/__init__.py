"""
Delivery Client for the commit summary action.

This service is responsible for:
- Normalizing the collector URL to its /generate-content endpoint
- Resolving repository and branch metadata
- Posting the summary and returning the collector's response
"""

__version__ = "1.0.0"
__description__ = "Summary delivery client"
