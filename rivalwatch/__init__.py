# rivalwatch/__init__.py
"""
rivalwatch: competitor page change detection.

Pipeline: PageFetcher → normalize() → ChangeClassifier → ChangeRecord.
"""

__version__ = "0.3.0"
