"""
Tool Tracker - lifecycle and audit core for tracking company tools.

Packages:
- core: configuration, logging, error taxonomy and validation primitives
- domain: entities, transitions and repository contracts
- db: SQLAlchemy engine/session and table models
- repositories: SQLAlchemy implementations of the domain contracts
- services: tool/user lifecycle, audit and stats use-cases
"""

__version__ = "0.1.0"
