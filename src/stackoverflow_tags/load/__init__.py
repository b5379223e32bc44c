"""
Load Layer - Local Persistence

Turns collected tags into a polars DataFrame and writes it to disk.
"""
