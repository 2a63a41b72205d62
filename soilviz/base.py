"""Abstract base class for upstream soil-survey data providers."""

from abc import ABC, abstractmethod

from soilviz.geo import validate_coordinates


class UpstreamProvider(ABC):
    """Common interface for the remote services a site report draws on.

    Providers report their identity and coverage so the service layer can
    present a status table without knowing each client's details.
    """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is currently reachable.

        Returns:
            True if provider can be used, False otherwise
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name for identification and logging."""
        pass

    @property
    @abstractmethod
    def coverage_description(self) -> str:
        """Description of geographic and data coverage."""
        pass

    def validate_coordinates(self, latitude: float, longitude: float) -> None:
        """Validate coordinate inputs.

        Raises:
            ValueError: If coordinates are invalid
        """
        validate_coordinates(latitude, longitude)
