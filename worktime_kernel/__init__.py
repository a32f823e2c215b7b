"""
Work-Time Kernel

Shared foundation for the time-and-attendance calculation engines:
- Typed exceptions with machine-readable codes
- Structured JSON logging with request-scoped context
- Immutable domain value objects (bookings, plans, findings, results)
"""

__version__ = "0.1.0"
