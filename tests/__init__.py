"""
Test package for the CodeTracker API.

Adds the project root to sys.path so tests can import app, models and
services without installing the package.
"""

import sys
import os

# Add parent directory to path to enable imports
parent_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if parent_dir not in sys.path:
    sys.path.insert(0, parent_dir)
