"""
Wiring for the notification dispatch service from environment settings.
"""

from typing import Optional

from config.settings import NotificationSettings, load_settings
from models.types import IdentityID
from notifications.audit_log import AuditLogStore, SupabaseAuditLogStore
from notifications.client import NotificationClient
from notifications.dispatcher import NotificationDispatcher
from notifications.email_sender import ResendEmailSender
from notifications.rate_limiter import RateLimiter
from shared.db import get_supabase_client


def create_dispatcher(
    settings: Optional[NotificationSettings] = None,
    store: Optional[AuditLogStore] = None,
    access_token: Optional[str] = None,
) -> NotificationDispatcher:
    """
    Build a dispatcher backed by Supabase and Resend.

    Raises:
        ConfigurationError: If RESEND_API_KEY is not set
        ValueError: If Supabase credentials are missing and no store is given
    """
    settings = settings or load_settings()
    sender = ResendEmailSender(
        api_key=settings.require_api_key(),
        from_address=settings.from_address,
        from_name=settings.from_name,
        api_url=settings.api_url,
        timeout=settings.timeout_seconds,
    )
    if store is None:
        store = SupabaseAuditLogStore(get_supabase_client(access_token))
    return NotificationDispatcher(
        store=store,
        rate_limiter=RateLimiter(store, settings.rate_limits),
        sender=sender,
        log_dir=settings.log_dir,
    )


def create_client(
    identity_id: IdentityID,
    settings: Optional[NotificationSettings] = None,
    store: Optional[AuditLogStore] = None,
    access_token: Optional[str] = None,
) -> NotificationClient:
    """Build a NotificationClient for one authenticated identity."""
    dispatcher = create_dispatcher(settings, store=store, access_token=access_token)
    return NotificationClient(dispatcher, identity_id)


def create_read_client(
    identity_id: IdentityID,
    settings: Optional[NotificationSettings] = None,
    store: Optional[AuditLogStore] = None,
    access_token: Optional[str] = None,
) -> NotificationClient:
    """
    Build a NotificationClient for log, stats and quota reads only.

    No email sender is configured, so RESEND_API_KEY is not required.
    Sending through this client raises DeliveryError.
    """
    settings = settings or load_settings()
    if store is None:
        store = SupabaseAuditLogStore(get_supabase_client(access_token))
    dispatcher = NotificationDispatcher(
        store=store,
        rate_limiter=RateLimiter(store, settings.rate_limits),
        sender=None,
        log_dir=settings.log_dir,
    )
    return NotificationClient(dispatcher, identity_id)
