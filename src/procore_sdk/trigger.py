"""Procore webhook trigger.

A :class:`WebhookTrigger` owns one Procore hook (``/webhooks/hooks``) that
delivers a single event kind to a single destination URL.  The hook id is
kept in ``state`` so a host can persist it between activations.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, MutableMapping

from procore_sdk.auth import AuthProvider
from procore_sdk.errors import ApiError, UnsupportedOperationError
from procore_sdk.helpers import format_date
from procore_sdk.models import RequestDescriptor
from procore_sdk.transport import API_VERSION, request

logger = logging.getLogger(__name__)

HOOKS_ENDPOINT = "/webhooks/hooks"
EVENT_HEADER = "X-Hook-Event"
HOOK_API_VERSION = "v2"

# event -> display name
TRIGGER_EVENTS: dict[str, str] = {
    "changeOrderCreated": "Change Order Created",
    "dailyLogCreated": "Daily Log Created",
    "documentUploaded": "Document Uploaded",
    "inspectionCompleted": "Inspection Completed",
    "invoiceSubmitted": "Invoice Submitted",
    "projectCreated": "Project Created",
    "punchItemClosed": "Punch Item Closed",
    "punchItemCreated": "Punch Item Created",
    "rfiCreated": "RFI Created",
    "rfiUpdated": "RFI Updated",
    "submittalCreated": "Submittal Created",
}

# event -> Procore hook namespace
WEBHOOK_EVENT_MAPPING: dict[str, str] = {
    "projectCreated": "projects.create",
    "rfiCreated": "rfis.create",
    "rfiUpdated": "rfis.update",
    "submittalCreated": "submittals.create",
    "documentUploaded": "documents.create",
    "punchItemCreated": "punch_items.create",
    "punchItemClosed": "punch_items.update",
    "changeOrderCreated": "change_orders.create",
    "invoiceSubmitted": "invoices.update",
    "inspectionCompleted": "inspections.update",
    "dailyLogCreated": "daily_logs.create",
}


class WebhookTrigger:
    """Registration lifecycle of one Procore hook plus delivery handling.

    Parameters
    ----------
    auth:
        Open auth provider.
    company_id:
        Company the hook belongs to; sent as the scope header.
    event:
        One of :data:`TRIGGER_EVENTS`.
    webhook_url:
        Public URL Procore should deliver to.
    project_id:
        Restrict the hook to one project; ``0`` registers a company-level hook.
    state:
        Mutable mapping holding ``webhook_id`` across activations.
    """

    def __init__(
        self,
        auth: AuthProvider,
        company_id: int,
        event: str,
        webhook_url: str,
        *,
        project_id: int = 0,
        state: MutableMapping[str, Any] | None = None,
        api_version: str = API_VERSION,
    ) -> None:
        self.auth = auth
        self.company_id = company_id
        self.event = event
        self.webhook_url = webhook_url
        self.project_id = project_id
        self.state = state if state is not None else {}
        self.api_version = api_version

    @property
    def webhook_id(self) -> Any:
        return self.state.get("webhook_id")

    @property
    def namespace(self) -> str | None:
        return WEBHOOK_EVENT_MAPPING.get(self.event)

    # ------------------------------------------------------------------
    # Registration lifecycle
    # ------------------------------------------------------------------

    async def check_exists(self) -> bool:
        """Look for a hook with our destination URL and event header."""
        if self.namespace is None:
            return False
        try:
            hooks = await self._call("GET", HOOKS_ENDPOINT)
        except ApiError as exc:
            logger.warning("Could not list Procore hooks: %s", exc)
            return False

        for hook in hooks if isinstance(hooks, list) else []:
            if not isinstance(hook, dict):
                continue
            headers = hook.get("destination_headers")
            if (
                hook.get("destination_url") == self.webhook_url
                and isinstance(headers, dict)
                and headers.get(EVENT_HEADER) == self.event
            ):
                self.state["webhook_id"] = hook.get("id")
                logger.debug("Found existing Procore hook %s for %s", hook.get("id"), self.event)
                return True
        return False

    async def create(self) -> bool:
        """Register the hook.  Returns false when Procore answers without an id."""
        namespace = self.namespace
        if namespace is None:
            raise UnsupportedOperationError(f"Event {self.event} is not supported")

        hook: dict[str, Any] = {
            "api_version": HOOK_API_VERSION,
            "destination_url": self.webhook_url,
            "destination_headers": {EVENT_HEADER: self.event},
            "namespace": namespace,
        }
        if self.project_id and self.project_id > 0:
            hook["project_id"] = self.project_id

        try:
            response = await self._call("POST", HOOKS_ENDPOINT, body={"hook": hook})
        except ApiError as exc:
            raise ApiError(
                f"Failed to create Procore webhook: {exc.message}",
                status_code=exc.status_code,
                response_body=exc.response_body,
            ) from exc

        if isinstance(response, dict) and response.get("id"):
            self.state["webhook_id"] = response["id"]
            logger.info(
                "Registered Procore hook %s (%s -> %s)", response["id"], namespace, self.webhook_url
            )
            return True
        return False

    async def delete(self) -> bool:
        """Remove the stored hook.  The stored id is kept if the API call fails."""
        webhook_id = self.webhook_id
        if webhook_id:
            try:
                await self._call("DELETE", f"{HOOKS_ENDPOINT}/{webhook_id}")
            except ApiError as exc:
                logger.warning("Could not delete Procore hook %s: %s", webhook_id, exc)
                return False
            logger.info("Deleted Procore hook %s", webhook_id)
        self.state.pop("webhook_id", None)
        return True

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    def handle(self, headers: Mapping[str, str], body: Mapping[str, Any] | None) -> dict[str, Any]:
        """Normalise one delivery into the record emitted to the workflow."""
        hook_event = None
        for key, value in headers.items():
            if key.lower() == EVENT_HEADER.lower():
                hook_event = value
                break
        return {
            "event": self.event,
            "hookEvent": hook_event,
            "timestamp": format_date(datetime.now(timezone.utc)),
            **dict(body or {}),
        }

    async def _call(self, method: str, endpoint: str, body: dict[str, Any] | None = None) -> Any:
        descriptor = RequestDescriptor(
            method=method, endpoint=endpoint, body=body, company_id=self.company_id
        )
        return await request(self.auth, descriptor, api_version=self.api_version)
