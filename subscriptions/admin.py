from django.contrib import admin
from .models import Subscriber

@admin.register(Subscriber)
class SubscriberAdmin(admin.ModelAdmin):
    list_display = ('address', 'contract', 'expiry', 'created_at')
    search_fields = ('address',)
    list_filter = ('contract', 'created_at')
    readonly_fields = ('id', 'contract', 'address', 'expiry', 'created_at')
    ordering = ('address',)

    def has_add_permission(self, request):
        # Entries are only created through join or instantiate
        return False
