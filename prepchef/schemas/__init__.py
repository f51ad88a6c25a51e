"""
Pydantic schemas for the PrepChef data layer.

Entity models use snake_case attributes and accept the camelCase names used
by the web client as aliases.
"""

from .auth import AuthResult, Identity
from .containers import Container
from .diagnostics import DiagnosisReport, RlsTestReport
from .events import Event
from .health import HealthResponse
from .methods import Method
from .prep_lists import PrepItem, PrepList
from .profile import ProfileUpdate, UserProfile
from .recipes import Recipe

__all__ = [
    "AuthResult",
    "Identity",
    "Container",
    "DiagnosisReport",
    "RlsTestReport",
    "Event",
    "HealthResponse",
    "Method",
    "PrepItem",
    "PrepList",
    "ProfileUpdate",
    "UserProfile",
    "Recipe",
]
