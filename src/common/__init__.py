"""
Common utilities for student-records.

Modules:
- validation: Pure field checks and form-level validation for student records
"""

__all__ = [
    "validation",
]
