import logging
from typing import Optional

from flask import g, has_request_context

audit_logger = logging.getLogger("sitecms.audit")


def log_action(
    *,
    action: str,
    entity_type: str,
    entity_id: Optional[str],
    payload: dict | None = None
):
    actor = getattr(g, "current_user", None) if has_request_context() else None

    audit_logger.info(
        "%s %s:%s by %s",
        action,
        entity_type,
        entity_id,
        actor or "system",
        extra={
            "audit": {
                "actor": actor,
                "action": action,
                "entity_type": entity_type,
                "entity_id": entity_id,
                "payload": payload or {},
            }
        },
    )
