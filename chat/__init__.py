"""Realtime chat between two users and its history API."""

from chat.routes import router
from chat.socket import ChatCoordinator, create_socket_server

__all__ = ["ChatCoordinator", "create_socket_server", "router"]
