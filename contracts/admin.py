from django.contrib import admin
from django.utils.html import format_html
from django.urls import reverse
from .models import Contract, OutboundMessage

class OutboundMessageInline(admin.TabularInline):
    model = OutboundMessage
    extra = 0
    can_delete = False
    readonly_fields = ['batch', 'sequence', 'kind', 'payload', 'status', 'delivery_attempts', 'created_at']
    fields = readonly_fields

    def has_add_permission(self, request, obj=None):
        return False

@admin.register(Contract)
class ContractAdmin(admin.ModelAdmin):
    list_display = ['id', 'creator', 'mutable', 'admin_count', 'subscriber_count', 'created_at']
    list_filter = ['mutable', 'created_at']
    search_fields = ['id', 'creator']
    # Roster changes go through update_admins/freeze so the guards apply
    readonly_fields = [
        'id', 'creator', 'admins', 'mutable', 'contract_name', 'contract_version',
        'created_at', 'updated_at'
    ]
    inlines = [OutboundMessageInline]

    fieldsets = (
        ('Registry', {
            'fields': ('id', 'creator', 'admins', 'mutable')
        }),
        ('Version', {
            'fields': ('contract_name', 'contract_version')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def admin_count(self, obj):
        return len(obj.admins)
    admin_count.short_description = 'Admins'

    def subscriber_count(self, obj):
        url = reverse('admin:subscriptions_subscriber_changelist') + f'?contract__id__exact={obj.id}'
        return format_html('<a href="{}">{}</a>', url, obj.subscribers.count())
    subscriber_count.short_description = 'Subscribers'

@admin.register(OutboundMessage)
class OutboundMessageAdmin(admin.ModelAdmin):
    list_display = ['batch', 'sequence', 'kind', 'contract', 'status', 'delivery_attempts', 'created_at']
    list_filter = ['kind', 'status', 'created_at']
    search_fields = ['batch', 'contract__id']
    readonly_fields = [
        'contract', 'batch', 'sequence', 'kind', 'payload', 'status',
        'delivery_attempts', 'last_delivery_error', 'created_at', 'delivered_at'
    ]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('contract')
