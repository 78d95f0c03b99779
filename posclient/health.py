"""
Connectivity check behind the "retry connection" action.
"""

import logging

import requests

from .errors import CONNECTION_ERROR

logger = logging.getLogger(__name__)


def check_connectivity(client):
    """
    Probe the API root once.

    Any HTTP answer below 500 means the server is reachable. Returns
    ``(reachable, message)``; there is no automatic retry, the operator
    triggers the check again.
    """
    url = f"{client.base_url}/"
    try:
        response = client.session.get(url, timeout=client.config.timeout)
    except requests.RequestException as e:
        logger.warning(f"Connectivity check to {url} failed: {e}")
        return False, CONNECTION_ERROR[1]

    if response.status_code >= 500:
        logger.warning(f"Connectivity check to {url} returned {response.status_code}")
        return False, f"Server returned error code {response.status_code}"
    return True, "Connected"
