"""
Handlers package
"""

__all__ = [
    "start",
    "help",
    "text_handler",
    "payment_handler"
]
