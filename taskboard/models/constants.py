"""Constants for taskboard.

This module centralizes default values used throughout the application.
"""

# Task defaults
DEFAULT_TASK_TITLE = "Untitled Task"
UNCATEGORIZED_LABEL = "Uncategorized"
NO_DUE_LABEL = "No due"

# Transport defaults
DEFAULT_API_BASE_URL = "http://localhost:8000"
DEFAULT_TASKS_PATH = "/tasks"
DEFAULT_TASK_BY_ID_PATH = "/tasks/{id}"
DEFAULT_CATEGORIES_PATH = "/categories"
DEFAULT_HTTP_TIMEOUT_SEC = 10.0

# Envelope keys tried, in order, when a response is not a bare list
TASK_ENVELOPE_KEYS = ("items", "tasks")
CATEGORY_ENVELOPE_KEYS = ("items", "categories")

# Board
DEFAULT_OWNER_NAME = "Student"
SORT_RECENT = "recent"
SORT_DUE_SOON = "due_soon"
SORT_MODES = (SORT_RECENT, SORT_DUE_SOON)

# Theme preference
THEME_LIGHT = "light"
THEME_DARK = "dark"
THEMES = (THEME_LIGHT, THEME_DARK)
DEFAULT_THEME = THEME_LIGHT
