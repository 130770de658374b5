"""Submission review handler.

Keeps per-submission Drive folders and summary documents in sync with the submission spreadsheet,
builds the Review Tracker spreadsheet, and grants reviewers access to their assigned submissions.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
