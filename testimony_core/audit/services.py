# testimony_core/audit/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

from django.db import transaction

from testimony_core.audit.models import AuditLogEntry

if TYPE_CHECKING:
    from testimony_core.iam.identity import Identity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditRecord:
    action: str
    target_type: str
    target_id: str
    actor_user_id: int | None
    details: Dict[str, Any]


class AuditService:
    """
    Central audit writer.
    One entry per administrative mutation; the actor always comes from the
    verified session identity, never from request payloads.
    """

    @staticmethod
    @transaction.atomic
    def log(
        *,
        actor: "Identity",
        action: str,
        target_type: str,
        target_id,
        details: Optional[Dict[str, Any]] = None,
    ) -> AuditRecord:
        details = details or {}

        AuditLogEntry.objects.create(
            actor_user_id=actor.user_id,
            actor_email=actor.email or "",
            actor_phone=actor.phone or "",
            action=action,
            target_type=target_type,
            target_id=str(target_id),
            details=details,
        )

        return AuditRecord(
            action=action,
            target_type=target_type,
            target_id=str(target_id),
            actor_user_id=actor.user_id,
            details=details,
        )

    @staticmethod
    def record(
        *,
        actor: "Identity",
        action: str,
        target_type: str,
        target_id,
        details: Optional[Dict[str, Any]] = None,
    ) -> AuditRecord | None:
        """
        Best-effort variant used after a primary mutation.

        The write runs in its own savepoint, so a failure here never rolls back
        or blocks the mutation. Failures are logged at ERROR so gaps in the
        audit trail are detectable.
        """
        try:
            rec = AuditService.log(
                actor=actor,
                action=action,
                target_type=target_type,
                target_id=target_id,
                details=details,
            )
        except Exception:
            logger.exception(
                "Failed to write audit log: action=%s target=%s:%s actor=%s",
                action,
                target_type,
                target_id,
                getattr(actor, "user_id", None),
            )
            return None

        logger.info("Audit log created: %s on %s %s", action, target_type, target_id)
        return rec
