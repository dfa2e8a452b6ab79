"""
Provider configuration model.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class ProviderConfig:
    """
    Provider configuration model.

    Args:
        authentication (dict): The configuration for the provider.
    """

    authentication: Optional[dict]
