"""
Bug Sniper - Timed Code Review Game Engine

A deterministic rules engine for a code-review arcade game. The player is
shown a short snippet with embedded defects and taps line numbers to find
them before the countdown runs out. The engine provides:
- Problem loading and validation
- Randomized, seedable problem pools
- Combo-based scoring
- A pure reducer for tap/skip/tick events
- End-of-session result aggregation
"""

__version__ = "0.1.0"
