"""
WML Adaptive: performance tracking and difficulty adaptation for WML lessons.

Packages:
- adaptive: The per-quiz engine and the quiz-completion workflow
- store: Performance record persistence (JSON files, in-memory)
- generation: Course prompt construction and topic recommendations
- cli: The ``wml`` command-line interface
"""

__version__ = "1.0.0"
