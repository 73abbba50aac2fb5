"""
Conventional PR Title - checks pull request titles against Conventional
Commits and proposes AI-generated alternatives.
"""

__version__ = "1.0.0"
