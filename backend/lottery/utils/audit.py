import logging

audit_logger = logging.getLogger("lottery.audit")


def _log_admin_action(
    admin_user: str,
    action: str,
    endpoint: str,
    target_pids: list[int] | None,
    request_body: dict | None,
    response_status: str,
    response_summary: dict | None,
    error_message: str | None = None,
):
    """Admin audit log record."""
    target_pids = target_pids or []
    audit_logger.info(
        "admin_action admin=%s action=%s endpoint=%s targets=%s target_count=%s "
        "request=%s status=%s summary=%s error=%s",
        admin_user,
        action,
        endpoint,
        target_pids,
        len(target_pids),
        request_body,
        response_status,
        response_summary,
        error_message,
    )
