"""
Talent Proof: randomized quiz assessment with behavioral cheating detection.
"""

__version__ = "3.0.0"
