from django.apps import AppConfig


class CourierAssignmentConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'courier_assignment'
    verbose_name = 'Courier Assignment Ledger'
