from abc import ABC, abstractmethod


class BaseTextService(ABC):

    @abstractmethod
    def complete(self, prompt: str) -> str:
        """
        Returns: the raw completion text
        """
        pass
