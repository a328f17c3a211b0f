# testimony_core/posts/apps.py
from django.apps import AppConfig


class PostsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "testimony_core.posts"
