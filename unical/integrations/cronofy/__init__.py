"""
Cronofy integration for Unical.

Aggregator connector over the Cronofy API.
"""

from unical.integrations.cronofy.adapter import CronofyAdapter
from unical.integrations.cronofy.auth import CronofyCredentialRefresher
from unical.integrations.cronofy.client import CronofyClient, api_base_url, validate_page_url
from unical.integrations.cronofy.connector import CronofyConnector

__all__ = [
    "CronofyAdapter",
    "CronofyClient",
    "CronofyConnector",
    "CronofyCredentialRefresher",
    "api_base_url",
    "validate_page_url",
]
