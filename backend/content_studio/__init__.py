"""
AI Content Studio - short-video generation and live transcription on Gemini.
"""

__version__ = "1.0.0"
