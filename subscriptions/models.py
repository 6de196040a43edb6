import uuid
from django.db import models
from contracts.validators import address_validator


class SubscriberState(models.TextChoices):
    ABSENT = 'absent', 'Absent'
    ACTIVE = 'active', 'Active'
    EXPIRED = 'expired', 'Expired'


class Subscriber(models.Model):
    """
    One ledger entry: an address and the absolute time (seconds) after which
    it can no longer be cancelled. Each entry is its own row.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    contract = models.ForeignKey('contracts.Contract', on_delete=models.CASCADE, related_name='subscribers')
    address = models.CharField(max_length=90, validators=[address_validator])
    expiry = models.PositiveBigIntegerField(help_text="Absolute expiry timestamp in seconds.")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'subscribers'
        verbose_name = 'Subscriber'
        verbose_name_plural = 'Subscribers'
        ordering = ['address']
        constraints = [
            models.UniqueConstraint(fields=['contract', 'address'], name='unique_contract_subscriber'),
        ]
        indexes = [
            models.Index(fields=['contract', 'expiry']),
        ]

    def __str__(self):
        return f"{self.address} until {self.expiry}"

    def state_at(self, now: int) -> SubscriberState:
        if now > self.expiry:
            return SubscriberState.EXPIRED
        return SubscriberState.ACTIVE
