"""Terminal rendering of issues and users.

Module Structure:
    - color.py: click-based styling and NO_COLOR/TTY detection
    - columns.py: issue table column registry and --column parsing
    - issue.py: issue list table and detail views (plain, markdown, JSON, YAML)
    - user.py: user table and detail view
"""
