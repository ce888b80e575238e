from django.apps import AppConfig


class AccountsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'portal.platform.accounts'
    label = 'accounts'
    verbose_name = 'Sessions & Sign-in'
