"""Base class for goal decomposition strategies."""

from abc import ABC, abstractmethod


class Decomposer(ABC):
    """Turns a breakdown prompt into a reply that should hold a JSON task array."""

    name: str = "decomposer"

    @abstractmethod
    def decompose(self, prompt: str) -> str:
        """
        Run the decomposition step.

        Args:
            prompt: Natural-language breakdown request

        Returns:
            Raw reply text; parsed defensively by the caller
        """
        pass
