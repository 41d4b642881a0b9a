"""
TTS Workbench: batch speech synthesis with a non-destructive audio editor.
"""
__version__ = "0.1.0"
