"""
Schemas for connection diagnostics and RLS capability probes.

The diagnostics endpoint is PUBLIC and read-only. Every probe failure is
recorded in ``errors``; the report itself is always complete.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from prepchef.schemas.profile import UserProfile


class DiagnosisUser(BaseModel):
    """Minimal view of the signed-in user."""
    id: str
    email: Optional[str] = None
    role: Optional[str] = None


class RlsTableStatus(BaseModel):
    """Row level security state for one table."""
    enabled: bool = False
    policies: List[str] = Field(default_factory=list, description="'<cmd>: <policyname>' entries")


class DiagnosisReport(BaseModel):
    """
    Response model for GET /health/diagnostics.
    """
    configured: bool = Field(False, description="Both Supabase secrets are set")
    accessible: bool = Field(False, description="At least one table answered a probe")
    authenticated: bool = Field(False, description="A session is active")
    tables: List[str] = Field(default_factory=list, description="Tables that answered")
    errors: List[str] = Field(default_factory=list, description="One entry per failed probe")
    user: Optional[DiagnosisUser] = None
    user_profile: Optional[UserProfile] = None
    policies: List[str] = Field(default_factory=list, description="'<table>.<policyname>' entries")
    rls_status: Dict[str, RlsTableStatus] = Field(default_factory=dict)

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "example": {
                "configured": False,
                "accessible": False,
                "authenticated": False,
                "tables": [],
                "errors": [
                    "SUPABASE_URL not configured",
                    "SUPABASE_ANON_KEY not configured",
                ],
                "user": None,
                "user_profile": None,
                "policies": [],
                "rls_status": {},
            }
        }


class RlsTableCapabilities(BaseModel):
    """What the current caller could do against one table."""
    can_read: bool = False
    can_insert: bool = False
    can_update: bool = False
    can_delete: bool = False
    errors: List[str] = Field(default_factory=list)


class RlsTestReport(BaseModel):
    authenticated: bool = False
    tables: Dict[str, RlsTableCapabilities] = Field(default_factory=dict)
