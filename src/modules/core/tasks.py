"""Background tasks of the core module."""

import structlog
from celery import shared_task
from django.conf import settings
from django.db.models import Q

from modules.core.models import EventStatus, OutboxEvent
from shared.domain.events import rehydrate_event
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)


@shared_task(name="core.publish_outbox_events")
def publish_outbox_events(batch_size=None):
    """Relay pending outbox rows to the in-process event bus.

    Rows are taken oldest first.  FAILED rows are retried until they reach
    ``OUTBOX_MAX_RETRIES``.  Each row is marked PUBLISHED or FAILED on its own
    so one broken handler does not block the rest of the batch.
    """
    limit = batch_size or settings.OUTBOX_BATCH_SIZE
    retryable = Q(status=EventStatus.PENDING) | Q(
        status=EventStatus.FAILED, retry_count__lt=settings.OUTBOX_MAX_RETRIES
    )
    rows = list(OutboxEvent.objects.filter(retryable).order_by("created_at")[:limit])

    published = failed = 0
    for row in rows:
        log = logger.bind(
            outbox_id=str(row.id),
            event_type=row.event_type,
            aggregate_id=row.aggregate_id,
        )
        try:
            event_bus.publish(rehydrate_event(row.event_type, row.payload))
        except Exception as exc:
            row.mark_as_failed(f"{type(exc).__name__}: {exc}")
            log.exception("outbox.publish_failed", retry_count=row.retry_count)
            failed += 1
            continue
        row.mark_as_published()
        log.info("outbox.published")
        published += 1

    logger.info("outbox.relay_completed", published=published, failed=failed)
    return {"published": published, "failed": failed}
