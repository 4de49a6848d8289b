"""
cliphistory
Clipboard history recorder: polls the clipboard, stores each distinct change
with a timestamp and kind, prunes by age, and pastes past entries back.
"""

__version__ = "0.1.0"
