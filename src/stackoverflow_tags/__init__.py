"""
Stack Overflow tag listing pipeline.

Walks the Stack Exchange `/tags` endpoint page by page and writes the
collected tags to a local CSV file.
"""

__version__ = "0.1.0"
