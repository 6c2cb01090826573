from django.contrib import admin

from .models import Profile, Company, Bus, Route, Schedule, SeatHold, Booking

# Customize admin site
admin.site.site_header = "Bus Booking Administration"
admin.site.site_title = "Bus Booking Admin"
admin.site.index_title = "Welcome to the Bus Booking Admin Panel"


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'role', 'phone', 'company', 'created_at']
    list_filter = ['role']
    search_fields = ['user__username', 'user__email', 'phone', 'firebase_uid']
    ordering = ['-created_at']


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'email', 'phone', 'is_active', 'owner', 'payment_service', 'created_at']
    list_filter = ['is_active']
    search_fields = ['name', 'email', 'phone']
    readonly_fields = ['payment_service', 'transaction_id', 'created_at', 'updated_at']


@admin.register(Bus)
class BusAdmin(admin.ModelAdmin):
    list_display = ['id', 'company', 'bus_number', 'bus_type', 'total_seats', 'is_active']
    list_filter = ['bus_type', 'is_active', 'company']
    search_fields = ['bus_number', 'company__name']

    def get_readonly_fields(self, request, obj=None):
        # Schedules hold inventory against this seat space
        if obj is not None and obj.schedules.exists():
            return ['total_seats']
        return []


@admin.register(Route)
class RouteAdmin(admin.ModelAdmin):
    list_display = ['id', 'company', 'origin', 'destination', 'distance', 'duration', 'is_active']
    list_filter = ['is_active', 'company']
    search_fields = ['origin', 'destination', 'company__name']


@admin.register(Schedule)
class ScheduleAdmin(admin.ModelAdmin):
    list_display = ['id', 'route', 'bus', 'date', 'departure_time', 'price', 'available_seats', 'get_booked_count', 'is_active']
    list_filter = ['is_active', 'date', 'company']
    search_fields = ['route__origin', 'route__destination', 'bus__bus_number']
    date_hierarchy = 'date'
    # Inventory changes only through bookings and cancellations
    readonly_fields = ['available_seats', 'booked_seats', 'version', 'created_at', 'updated_at']

    def get_booked_count(self, obj):
        return len(obj.booked_seats)
    get_booked_count.short_description = 'Booked'

    def get_readonly_fields(self, request, obj=None):
        # Bus changes go through ScheduleService.change_bus
        if obj is not None:
            return ['bus'] + self.readonly_fields
        return self.readonly_fields

    def save_model(self, request, obj, form, change):
        if not change:
            obj.initialize_inventory()
            super().save_model(request, obj, form, change)
            return
        # Inventory columns on obj may be stale by now
        obj.save(update_fields=list(form.changed_data) + ['updated_at'])


@admin.register(SeatHold)
class SeatHoldAdmin(admin.ModelAdmin):
    list_display = ['id', 'schedule', 'seat_number', 'holder', 'expires_at', 'is_expired']
    search_fields = ['seat_number', 'holder__username', 'hold_token']

    def is_expired(self, obj):
        return obj.is_expired
    is_expired.boolean = True


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'schedule', 'company', 'total_amount', 'booking_status', 'payment_status', 'booking_flow', 'booking_date']
    list_filter = ['booking_status', 'payment_status', 'booking_flow', 'company']
    search_fields = ['id', 'user__username', 'user__email', 'transaction_id']
    ordering = ['-booking_date']
    readonly_fields = [
        'user', 'schedule', 'company', 'seat_numbers', 'passenger_details', 'total_amount',
        'booking_status', 'payment_id', 'payment_service', 'transaction_id', 'idempotency_key',
        'booking_date', 'cancelled_at',
    ]

    def has_delete_permission(self, request, obj=None):
        return False
