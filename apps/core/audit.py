"""
Audit logging helpers.

Views call log_cash_action() after a successful mutation so that the
audit trail only contains operations that actually changed state.
"""

import logging

from apps.core.audit_models import AuditLog

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """
    Extract client IP address from request.

    Args:
        request: HTTP request object

    Returns:
        str: Client IP address
    """
    x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
    if x_forwarded_for:
        ip = x_forwarded_for.split(",")[0].strip()
    else:
        ip = request.META.get("REMOTE_ADDR")
    return ip


def _json_safe(value):
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return str(value)


def log_cash_action(
    action,
    description,
    category=AuditLog.CATEGORY_CASH_DRAWER,
    instance=None,
    tenant=None,
    user=None,
    metadata=None,
    request=None,
    severity=AuditLog.SEVERITY_INFO,
):
    """
    Record a cash management action.

    Args:
        action: One of the AuditLog.ACTION_* constants
        description: Human-readable description
        category: AuditLog.CATEGORY_* constant
        instance: Affected model instance, if any
        tenant: Tenant (derived from user when omitted)
        user: User who performed the action
        metadata: Extra JSON-serializable details; Decimals and dates are stringified
        request: HTTP request object

    Returns:
        AuditLog: The created entry
    """
    if tenant is None and user is not None:
        tenant = getattr(user, "tenant", None)

    entry = AuditLog.objects.create(
        tenant=tenant,
        user=user if user is not None and user.is_authenticated else None,
        category=category,
        action=action,
        severity=severity,
        description=description,
        object_type=instance.__class__.__name__ if instance is not None else "",
        object_id=str(instance.pk) if instance is not None else None,
        ip_address=get_client_ip(request) if request else None,
        metadata=_json_safe(metadata) if metadata else None,
    )
    logger.info(f"Audit {action}: {description}")
    return entry
