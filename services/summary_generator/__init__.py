"""
Summary Generator for the commit summary action.

This service is responsible for:
- Building the commit summarization prompt
- Calling the chat-completions backend
- Validating the response shape and extracting the summary text
"""

__version__ = "1.0.0"
__description__ = "AI commit summarization client"
