"""
Base class for all providers.
"""

import abc
import logging
import os
import re

from gke_notifications.providers.models.provider_config import ProviderConfig


class BaseProvider(metaclass=abc.ABCMeta):
    PROVIDER_DISPLAY_NAME: str = ""

    def __init__(self, provider_id: str, config: ProviderConfig):
        """
        Initialize a provider.

        Args:
            provider_id (str): The provider id.
            config (ProviderConfig): The provider configuration.
        """
        self.provider_id = provider_id
        self.config = config

        self.logger = logging.getLogger(self.provider_id)
        self.logger.setLevel(
            os.environ.get(
                "GKE_NOTIFICATIONS_{}_PROVIDER_LOG_LEVEL".format(
                    self.provider_id.upper()
                ),
                os.environ.get("LOG_LEVEL", "INFO"),
            )
        )

        self.validate_config()
        self.logger.debug(
            "Base provider initialized", extra={"provider": self.__class__.__name__}
        )
        self.provider_type = self._extract_type()

    def _extract_type(self):
        """
        Extract the provider type from the provider class name.

        Returns:
            str: The provider type.
        """
        name = self.__class__.__name__
        name_without_provider = name.replace("Provider", "")
        name_with_spaces = (
            re.sub("([A-Z])", r" \1", name_without_provider).lower().strip()
        )
        return name_with_spaces.replace(" ", ".")

    @abc.abstractmethod
    def dispose(self):
        """
        Dispose of the provider.
        """
        raise NotImplementedError("dispose() method not implemented")

    @abc.abstractmethod
    def validate_config(self):
        """
        Validate provider configuration.
        """
        raise NotImplementedError("validate_config() method not implemented")

    def notify(self, **kwargs):
        """
        Deliver a notification through the provider.

        Args:
            **kwargs (dict): Provider specific notification arguments.
        """
        self.logger.debug(
            "Notifying through provider", extra={"provider_type": self.provider_type}
        )
        return self._notify(**kwargs)

    def _notify(self, **kwargs):
        raise NotImplementedError("_notify() method not implemented")
