"""
Pipeline Orchestrator for the commit summary action.

This service is responsible for:
- Validating the run configuration
- Choosing between a supplied summary and a generated one
- Delivering the summary when a collector is configured
- Mapping every outcome to outputs and a completion status
"""

__version__ = "1.0.0"
__description__ = "Commit summary pipeline orchestration"
