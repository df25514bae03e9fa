"""
Output of published articles and debug snapshots of failed runs.
"""

from .service import FileOutputService, OutputService, get_output_service

__all__ = [
    "OutputService",
    "FileOutputService",
    "get_output_service",
]
