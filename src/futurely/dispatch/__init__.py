"""Dispatch module - daily delivery run, scheduler, and delivery log."""

from futurely.dispatch.factories import UnsupportedChannelError, create_delivery_channel
from futurely.dispatch.models import DeliveryAttempt
from futurely.dispatch.router import router as dispatch_router
from futurely.dispatch.runner import deliver_letter, dispatch_letter, run_daily_delivery
from futurely.dispatch.scheduler import (
    deliver_due_letters,
    get_scheduler,
    setup_scheduler,
    shutdown_scheduler,
    start_scheduler,
)
from futurely.dispatch.schemas import (
    DeliveryAttemptListResponse,
    DeliveryAttemptResponse,
    DeliveryRunSummary,
    DueLetter,
)
from futurely.dispatch.service import (
    get_due_letters,
    list_attempts_for_letter,
    mark_letter_delivered,
    record_delivery_attempt,
)

__all__ = [
    # Models
    "DeliveryAttempt",
    # Schemas
    "DeliveryAttemptListResponse",
    "DeliveryAttemptResponse",
    "DeliveryRunSummary",
    "DueLetter",
    # Factories
    "UnsupportedChannelError",
    "create_delivery_channel",
    # Runner
    "deliver_letter",
    "dispatch_letter",
    "run_daily_delivery",
    # Scheduler
    "deliver_due_letters",
    "get_scheduler",
    "setup_scheduler",
    "shutdown_scheduler",
    "start_scheduler",
    # Router
    "dispatch_router",
    # Service
    "get_due_letters",
    "list_attempts_for_letter",
    "mark_letter_delivered",
    "record_delivery_attempt",
]
