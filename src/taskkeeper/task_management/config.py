"""Configuration constants for task management functionality."""

import os

# Storage Configuration
DEFAULT_DATABASE_PATH = os.path.expanduser("~/.taskkeeper/tasks.db")
DEFAULT_WAL_MODE = True

# Database Schema Version
SCHEMA_VERSION = 1

# Task defaults
DEFAULT_CATEGORY = "General"

# Trash retention policy
DEFAULT_TRASH_RETENTION_DAYS = 30

# Calendar grid: 6 weeks x 7 days
CALENDAR_WEEKS = 6
CALENDAR_GRID_SIZE = CALENDAR_WEEKS * 7

# MCP Server Configuration
DEFAULT_MCP_HOST = "localhost"
DEFAULT_MCP_PORT = 3000
DEFAULT_MCP_SERVER_NAME = "taskkeeper"
