"""
Built-in actions.
"""

from .requests_action import RequestsAction, create_http_action, create_joke_search_action

__all__ = ["RequestsAction", "create_http_action", "create_joke_search_action"]
