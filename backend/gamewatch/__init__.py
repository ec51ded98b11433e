"""
GameWatch - pick the NFL broadcasts that matter most to your fantasy rosters
"""

__version__ = "1.0.0"
