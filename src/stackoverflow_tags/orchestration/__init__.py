"""
Orchestration Layer - Workflow Coordination

Composes the extract and load layers.
- Pure workflow coordination
- No HTTP or file format details
"""
