"""
Extract Layer - I/O against the Stack Exchange API

- No imports from the load or orchestration layers
- The API client issues exactly one request per call
- Pacing and retries live in the paginator
"""
