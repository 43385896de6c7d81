"""
SWMP Summary Workflows Package
Caller-facing entry points for seasonal and annual summaries

Available Workflows:
- summarize: Validate, fill, aggregate and summarize one parameter
- SummaryWorkflow: Run summarize from a SummaryConfiguration
"""

from .summary_workflow import OutputMode, SummaryWorkflow, summarize

__all__ = [
    'OutputMode',
    'SummaryWorkflow',
    'summarize'
]
