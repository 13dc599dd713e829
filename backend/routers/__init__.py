from . import auth, categories, comments, dashboard, profile, reminders, tags, todos

__all__ = ["auth", "categories", "comments", "dashboard", "profile", "reminders", "tags", "todos"]
