"""
Connection diagnostics.

Read-only observability helpers. Nothing here raises: every failed probe is
recorded as a string in the report's error list and the report is always
returned complete.
"""

import logging
import uuid
from datetime import date
from typing import TYPE_CHECKING, Any, Dict

from prepchef.errors import error_message, is_rls_error
from prepchef.schemas.diagnostics import (
    DiagnosisReport,
    DiagnosisUser,
    RlsTableCapabilities,
    RlsTableStatus,
    RlsTestReport,
)

if TYPE_CHECKING:
    from prepchef.services.database import DatabaseService

logger = logging.getLogger(__name__)

ENTITY_TABLES = ["prep_lists", "events", "recipes", "methods", "containers"]
DIAGNOSED_TABLES = ["user_profiles"] + ENTITY_TABLES


async def _probe_table(db: "DatabaseService", report: DiagnosisReport, table: str) -> None:
    try:
        await db.require_client().table(table).select("id").limit(1).execute()
    except Exception as exc:
        if is_rls_error(exc):
            who = "user authenticated" if report.authenticated else "no authentication"
            report.errors.append(f"Table '{table}': RLS policy active ({who})")
            report.tables.append(f"{table} (RLS active)")
            report.accessible = True
        else:
            report.errors.append(f"Table '{table}': {error_message(exc)}")
        return

    report.tables.append(table)
    report.accessible = True


async def _check_rls(db: "DatabaseService", report: DiagnosisReport, table: str) -> None:
    client = db.require_client()
    try:
        pg_class = await (
            client.table("pg_class")
            .select("relname, relrowsecurity")
            .eq("relname", table)
            .limit(1)
            .execute()
        )
        rows = pg_class.data or []
        enabled = bool(rows[0].get("relrowsecurity")) if rows else False

        pg_policies = await (
            client.table("pg_policies")
            .select("policyname, permissive, roles, cmd")
            .eq("schemaname", "public")
            .eq("tablename", table)
            .execute()
        )
        policies = pg_policies.data or []
    except Exception as exc:
        logger.debug(f"RLS status unavailable for {table}: {error_message(exc)}")
        report.rls_status[table] = RlsTableStatus(enabled=False, policies=["Unable to check policies"])
        report.errors.append(f"Could not check RLS policies for '{table}' (may be restricted)")
        return

    report.rls_status[table] = RlsTableStatus(
        enabled=enabled,
        policies=[f"{p.get('cmd')}: {p.get('policyname')}" for p in policies],
    )
    report.policies.extend(f"{table}.{p.get('policyname')}" for p in policies)


async def diagnose_connection(db: "DatabaseService") -> DiagnosisReport:
    """
    Check configuration, auth, table reachability and RLS status.

    Returns:
        A complete DiagnosisReport. With missing configuration this is
        configured=False, accessible=False and one error per missing secret.
    """
    report = DiagnosisReport()

    try:
        missing = db.settings.missing()
        report.errors.extend(f"{name} not configured" for name in missing)
        report.configured = not missing

        if report.configured and db.client is not None:
            try:
                session = await db.client.auth.get_session()
            except Exception as exc:
                report.errors.append(f"Auth error: {error_message(exc)}")
                session = None

            user = getattr(session, "user", None)
            if user is not None:
                report.authenticated = True
                report.user = DiagnosisUser(
                    id=str(user.id),
                    email=getattr(user, "email", None),
                    role=getattr(user, "role", None),
                )
                if db.session.identity is not None:
                    report.user_profile = await db.session.ensure_profile()

            for table in DIAGNOSED_TABLES:
                await _probe_table(db, report, table)

            if report.authenticated:
                for table in DIAGNOSED_TABLES:
                    await _check_rls(db, report, table)
    except Exception as exc:
        report.errors.append(f"Connection diagnosis failed: {error_message(exc)}")
    finally:
        db.session.reset_connection()

    logger.info(
        f"Diagnosis: configured={report.configured} accessible={report.accessible} "
        f"authenticated={report.authenticated} errors={len(report.errors)}"
    )
    return report


def _probe_row(table: str, row_id: str) -> Dict[str, Any]:
    """Smallest valid row for each entity table."""
    rows: Dict[str, Dict[str, Any]] = {
        "prep_lists": {"name": "RLS Test List", "items": []},
        "events": {
            "name": "RLS Test Event",
            "date": date.today().isoformat(),
            "status": "planning",
            "total_servings": 0,
        },
        "recipes": {"name": "RLS Test Recipe", "ingredients": [], "instructions": []},
        "methods": {"name": "RLS Test Method", "instructions": []},
        "containers": {"name": "RLS Test Container", "type": "test"},
    }
    return {"id": row_id, **rows[table]}


async def probe_rls_policies(db: "DatabaseService") -> RlsTestReport:
    """
    Probe what the caller can read, insert, update and delete per table.

    Writes a throwaway row per table (then deletes it), so only runs the
    write probes when a user is signed in.
    """
    identity = db.session.identity
    report = RlsTestReport(authenticated=identity is not None)

    for table in ENTITY_TABLES:
        caps = RlsTableCapabilities()
        report.tables[table] = caps

        if db.client is None:
            caps.errors.append("Read: Supabase client not configured")
            continue

        try:
            await db.client.table(table).select("id").limit(1).execute()
            caps.can_read = True
        except Exception as exc:
            caps.errors.append(f"Read: {error_message(exc)}")

        if identity is None:
            continue

        row_id = str(uuid.uuid4())
        row = {**_probe_row(table, row_id), "user_id": identity.id}
        try:
            await db.client.table(table).insert(row).execute()
            caps.can_insert = True
        except Exception as exc:
            caps.errors.append(f"Insert: {error_message(exc)}")
            continue

        try:
            await db.client.table(table).update({"name": "RLS Test Updated"}).eq("id", row_id).execute()
            caps.can_update = True
        except Exception as exc:
            caps.errors.append(f"Update: {error_message(exc)}")

        try:
            await db.client.table(table).delete().eq("id", row_id).execute()
            caps.can_delete = True
        except Exception as exc:
            caps.errors.append(f"Delete: {error_message(exc)}")

    return report

