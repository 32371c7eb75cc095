"""Issue board components.

- Sources loaded from a YAML config file
- Structured logging
- Redmine fetching and per-assignee aggregation
- HTML rendering
- A small CLI surface
"""
