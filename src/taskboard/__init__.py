"""Taskboard task management service.

A REST API where users register and sign in with bearer tokens, create
tasks, assign executors and discuss tasks in comments.
"""

__version__ = "0.1.0"
