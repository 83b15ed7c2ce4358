"""
AI coach for AlphaOne.

Reads trades as context. Never writes to the ledger.
"""

from alphaone.coach.gemini import GeminiCoach

__all__ = ["GeminiCoach"]
