"""
Factory Pattern for Classifier Creation

Sessions pick their domain policy by name, so new policies plug in
without touching the pipeline.
"""

from typing import Dict, Any, Type, Optional

from .base import BaseClassifier


class ClassifierFactory:
    """
    Registry of domain classifiers.
    """

    _classifiers: Dict[str, Type[BaseClassifier]] = {}

    @classmethod
    def register(cls, name: str, classifier_class: Type[BaseClassifier]) -> None:
        """
        Register a classifier class.

        Args:
            name: Classifier identifier (e.g., 'bridge_safety')
            classifier_class: Class implementing BaseClassifier
        """
        cls._classifiers[name] = classifier_class

    @classmethod
    def create(cls, classifier_type: str, **kwargs: Any) -> BaseClassifier:
        """
        Create classifier instance.

        Raises:
            ValueError: If classifier type not registered
        """
        if classifier_type not in cls._classifiers:
            raise ValueError(
                f"Unknown classifier type: {classifier_type}. Available: {list(cls._classifiers.keys())}"
            )
        return cls._classifiers[classifier_type](**kwargs)

    @classmethod
    def get_available(cls) -> list:
        return list(cls._classifiers.keys())

    @classmethod
    def unregister(cls, name: str) -> Optional[Type[BaseClassifier]]:
        return cls._classifiers.pop(name, None)
