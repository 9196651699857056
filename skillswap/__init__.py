"""
SkillSwap Hub admin client

Paginated, filterable list screens over the SkillSwap Hub REST API.
"""

__version__ = "1.0.0"
