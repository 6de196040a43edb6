import uuid
from django.db import models
from django.utils import timezone


class Contract(models.Model):
    """
    One instantiated registry. Holds the admin roster and its mutability flag;
    the subscription ledger hangs off it as Subscriber rows.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    creator = models.CharField(max_length=90)
    admins = models.JSONField(default=list, help_text="Ordered list of admin addresses")
    mutable = models.BooleanField(default=True, help_text="Cleared for good by freeze")

    contract_name = models.CharField(max_length=100)
    contract_version = models.CharField(max_length=20)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'contracts'
        verbose_name = 'Contract'
        verbose_name_plural = 'Contracts'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.contract_name} {self.id}"

    def is_admin(self, addr: str) -> bool:
        """Returns True if the address is a registered admin."""
        return addr in self.admins

    def can_modify(self, addr: str) -> bool:
        """Returns True if the address is an admin and the roster is still mutable."""
        return self.mutable and self.is_admin(addr)


class OutboundMessage(models.Model):
    """Host-bound instruction emitted by a successful call, delivered after commit."""

    class Kind(models.TextChoices):
        BANK = 'bank', 'Value Transfer'
        RELAY = 'relay', 'Relayed Action'

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        SENDING = 'sending', 'Sending'
        DELIVERED = 'delivered', 'Delivered'
        FAILED = 'failed', 'Failed'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    contract = models.ForeignKey(Contract, on_delete=models.CASCADE, related_name='outbound_messages')
    batch = models.UUIDField(help_text="Shared by every message emitted by one call")
    sequence = models.PositiveIntegerField()
    kind = models.CharField(max_length=10, choices=Kind.choices)
    payload = models.JSONField()
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    delivery_attempts = models.PositiveIntegerField(default=0)
    last_delivery_error = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    delivered_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'outbound_messages'
        verbose_name = 'Outbound Message'
        verbose_name_plural = 'Outbound Messages'
        ordering = ['created_at', 'sequence']
        constraints = [
            models.UniqueConstraint(fields=['batch', 'sequence'], name='unique_batch_sequence'),
        ]
        indexes = [
            models.Index(fields=['status']),
            models.Index(fields=['batch']),
        ]

    def __str__(self):
        return f"{self.get_kind_display()} {self.batch}#{self.sequence} - {self.status}"

    def record_failure(self, error: str):
        """Increments the attempt counter and keeps the last error."""
        self.delivery_attempts += 1
        self.status = self.Status.FAILED
        self.last_delivery_error = error
        self.save(update_fields=['delivery_attempts', 'status', 'last_delivery_error'])

    def mark_as_delivered(self):
        self.delivery_attempts += 1
        self.status = self.Status.DELIVERED
        self.delivered_at = timezone.now()
        self.last_delivery_error = ""
        self.save(update_fields=['delivery_attempts', 'status', 'delivered_at', 'last_delivery_error'])
