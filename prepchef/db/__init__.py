"""
Database access layer for the PrepChef data layer.

All database operations MUST:
- Respect Row Level Security (RLS); the anon key never bypasses it
- Never invent schemas, table names, or SQL queries

DO NOT define table schemas, migrations, or RLS policies here.
"""

from .client import create_supabase_client

__all__ = ["create_supabase_client"]
