"""Data access for the hosted Postgres (Supabase) backend.

Thin wrappers around table queries used by the functions and dashboards.
Query failures surface as :class:`RepositoryError`.
"""

from datetime import UTC, datetime
from typing import Any

from postgrest.exceptions import APIError
from supabase import Client, create_client

from fleetops.errors import RepositoryError
from fleetops.utils.config import DatabaseConfig
from fleetops.utils.logger import get_logger

logger = get_logger(__name__)

UNIQUE_VIOLATION = "23505"

TABLES = (
    "yacht_profiles",
    "equipment",
    "inventory_items",
    "compliance_requirements",
    "warranty_claims",
    "enhanced_error_logs",
    "ai_providers_unified",
    "ai_models_unified",
    "ai_languages",
    "ai_model_logs",
    "workflow_executions",
)


def _now() -> str:
    return datetime.now(UTC).isoformat()


class FleetRepository:
    """Queries against the fleet tables.

    Args:
        client: A Supabase client.
    """

    def __init__(self, client: Client) -> None:
        self.client = client

    @classmethod
    def from_config(
        cls, config: DatabaseConfig, use_service_role: bool = True
    ) -> "FleetRepository":
        """Connect with the service-role key (or the anon key)."""
        key = config.service_key if use_service_role else config.anon_key
        if not config.url or not key:
            raise RepositoryError("Database URL or key not configured")
        return cls(create_client(config.url, key))

    def _execute(self, query: Any, action: str) -> list[dict[str, Any]]:
        try:
            response = query.execute()
        except APIError as exc:
            logger.error("Database error while trying to %s: %s", action, exc.message)
            raise RepositoryError(f"Failed to {action}: {exc.message}") from exc
        return response.data or []

    def list_rows(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        """Select all rows of a table matching equality filters."""
        if table not in TABLES:
            raise RepositoryError(f"Unknown table: {table}")
        query = self.client.table(table).select("*")
        for column, value in (filters or {}).items():
            query = query.eq(column, value)
        if order_by:
            query = query.order(order_by, desc=descending)
        return self._execute(query, f"list {table}")

    def yacht_rows(self, table: str, yacht_id: str) -> list[dict[str, Any]]:
        """Rows of a per-yacht table for one yacht."""
        return self.list_rows(table, {"yacht_id": yacht_id})

    def save_yacht_profile(self, yacht_data: dict[str, Any]) -> dict[str, Any]:
        """Insert an onboarding record, or update it when it carries an id."""
        payload = {**yacht_data, "updated_at": _now()}
        if payload.get("id"):
            query = (
                self.client.table("yacht_profiles")
                .update(payload)
                .eq("id", payload["id"])
            )
        else:
            query = self.client.table("yacht_profiles").insert(payload)
        rows = self._execute(query, "save yacht profile")
        logger.info("Saved yacht profile %s", rows[0].get("id") if rows else "?")
        return rows[0] if rows else payload

    def log_error(
        self,
        message: str,
        module: str,
        severity: str = "error",
        context: dict[str, Any] | None = None,
    ) -> None:
        """Record an application error for the error dashboard."""
        self._execute(
            self.client.table("enhanced_error_logs").insert(
                {
                    "error_message": message,
                    "module": module,
                    "severity": severity,
                    "context": context or {},
                    "created_at": _now(),
                }
            ),
            "log error",
        )

    def active_providers(self) -> list[dict[str, Any]]:
        """Active AI providers, primary first."""
        return self._execute(
            self.client.table("ai_providers_unified")
            .select("*")
            .eq("is_active", True)
            .order("is_primary", desc=True),
            "list AI providers",
        )

    def active_models(self, provider_id: str | None = None) -> list[dict[str, Any]]:
        """Active AI models by descending priority."""
        query = self.client.table("ai_models_unified").select("*").eq("is_active", True)
        if provider_id:
            query = query.eq("provider_id", provider_id)
        return self._execute(query.order("priority", desc=True), "list AI models")

    def active_languages(self) -> list[dict[str, Any]]:
        return self._execute(
            self.client.table("ai_languages")
            .select("*")
            .eq("is_active", True)
            .order("language_code"),
            "list languages",
        )

    def add_language(
        self, language_code: str, language_name: str, script_direction: str = "ltr"
    ) -> dict[str, Any]:
        """Insert an active language.

        Raises:
            RepositoryError: If the language already exists or the insert fails.
        """
        try:
            response = (
                self.client.table("ai_languages")
                .insert(
                    {
                        "language_code": language_code,
                        "language_name": language_name,
                        "script_direction": script_direction,
                        "is_active": True,
                    }
                )
                .execute()
            )
        except APIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                raise RepositoryError(
                    f"Language {language_code} already exists"
                ) from exc
            raise RepositoryError(f"Failed to add language: {exc.message}") from exc
        logger.info("Added language %s (%s)", language_name, language_code)
        return response.data[0] if response.data else {}

    def update_provider_languages(self, provider_id: str, languages: list[str]) -> None:
        self._execute(
            self.client.table("ai_providers_unified")
            .update({"supported_languages": languages})
            .eq("id", provider_id),
            "update provider languages",
        )

    def update_provider_config(
        self, provider_id: str, config: dict[str, Any]
    ) -> dict[str, Any]:
        rows = self._execute(
            self.client.table("ai_providers_unified")
            .update({"config": config, "updated_at": _now()})
            .eq("id", provider_id),
            "update provider config",
        )
        if not rows:
            raise RepositoryError(f"Provider not found: {provider_id}")
        return rows[0]

    def log_inference(self, entry: dict[str, Any]) -> None:
        """Append an inference record to the model log."""
        self._execute(self.client.table("ai_model_logs").insert(entry), "log inference")

    def record_workflow_execution(
        self,
        workflow_id: str,
        status: str,
        result: dict[str, Any] | None = None,
        error: str | None = None,
    ) -> dict[str, Any]:
        """Store the outcome of a workflow run."""
        row = {
            "workflow_id": workflow_id,
            "status": status,
            "result": result or {},
            "error_message": error,
            "completed_at": _now() if status in ("completed", "failed") else None,
        }
        rows = self._execute(
            self.client.table("workflow_executions").insert(row),
            "record workflow execution",
        )
        return rows[0] if rows else row
