"""
Notification dedup ledger.

One row per (work item, threshold, recipient), enforced by unique
constraints. Claiming is insert-if-absent so two overlapping scans
can never both win the same key.
"""

from django.utils import timezone

from projects.models import DeadlineLedgerEntry


def claim(item, threshold, recipient, sent_at=None):
    """
    Insert the ledger entry for (item, threshold, recipient) if absent.

    Returns (entry, created). ``created`` is False when the key was
    already recorded, i.e. the notification must not be sent again.
    """
    return DeadlineLedgerEntry.objects.get_or_create(
        threshold=threshold,
        recipient=recipient,
        defaults={"sent_at": sent_at or timezone.now()},
        **DeadlineLedgerEntry.owner_filter(item),
    )


def has_fired(item, threshold, recipient):
    return DeadlineLedgerEntry.objects.filter(
        threshold=threshold,
        recipient=recipient,
        **DeadlineLedgerEntry.owner_filter(item),
    ).exists()


def entries_for(item):
    return list(
        DeadlineLedgerEntry.objects
        .filter(**DeadlineLedgerEntry.owner_filter(item))
        .select_related("recipient")
        .order_by("sent_at", "pk")
    )
