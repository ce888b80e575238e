from django.apps import AppConfig


class WorkspaceConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "portal.workspace"
    label = "workspace"
    verbose_name = "Workspace pages"
