"""
PrepChef data layer: async Supabase access for prep lists, events, recipes,
methods, containers and user profiles.
"""

__version__ = "0.1.0"
