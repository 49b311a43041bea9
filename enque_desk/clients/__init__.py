"""Clients for the Enque REST API."""

from enque_desk.clients.api_client import EnqueApiClient, clean_params, filter_params

__all__ = ["EnqueApiClient", "clean_params", "filter_params"]
