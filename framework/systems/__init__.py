"""
Systems - the runtime surface of the framework.
"""

from framework.systems.dialog import DialogueSystem

__all__ = [
    "DialogueSystem",
]
