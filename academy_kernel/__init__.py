"""
Academy Kernel

Shared infrastructure for the academy payroll and statutory-filing engine:
- Typed, coded exceptions
- Structured JSON logging
- Injectable clock and workflow value objects
- SQLAlchemy declarative base and session management
"""

__version__ = "0.1.0"
