"""
Service layer for the PrepChef data layer.

Contains the DatabaseService (client, session and operation guard) and the
per-entity operations built on it:
- Sanitize requests into rows, validating required fields locally
- Guard mutations against duplicate and concurrent repeats
- Normalize rows coming back from Supabase into domain models

Every operation takes the DatabaseService instance as its first argument.
"""

from .auth_service import get_current_user, sign_in, sign_out, sign_up
from .container_service import delete_container, load_containers, save_container
from .database import DatabaseService
from .diagnostics import diagnose_connection, probe_rls_policies
from .event_service import delete_event, load_events, save_event
from .method_service import delete_method, load_methods, save_method
from .operation_guard import OperationGuard, derive_operation_key
from .prep_list_service import delete_prep_list, load_prep_lists, save_prep_list
from .profile_service import (
    get_current_user_profile,
    get_user_profile,
    get_users_by_company,
    update_user_profile,
)
from .realtime import create_realtime_channel
from .recipe_service import delete_recipe, load_recipes, save_recipe
from .sample_data import cleanup_sample_data, create_sample_data
from .session import SessionManager

__all__ = [
    "DatabaseService",
    "SessionManager",
    "OperationGuard",
    "derive_operation_key",
    "sign_up",
    "sign_in",
    "sign_out",
    "get_current_user",
    "get_user_profile",
    "get_current_user_profile",
    "update_user_profile",
    "get_users_by_company",
    "save_prep_list",
    "load_prep_lists",
    "delete_prep_list",
    "save_event",
    "load_events",
    "delete_event",
    "save_recipe",
    "load_recipes",
    "delete_recipe",
    "save_method",
    "load_methods",
    "delete_method",
    "save_container",
    "load_containers",
    "delete_container",
    "diagnose_connection",
    "probe_rls_policies",
    "create_realtime_channel",
    "create_sample_data",
    "cleanup_sample_data",
]
