"""Base operation class."""

import logging
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)


class BaseOperation(ABC):
    """Abstract base class for operations run over a loaded document.

    Operations receive a DocumentProcessor and persist their results
    through its state manager under the operation name.
    """

    name = "operation"

    def __init__(self, processor: Any, persist: bool = True):
        """Initialize operation.

        Args:
            processor: DocumentProcessor instance
            persist: Save the result to the processor's state after execute()
        """
        self.processor = processor
        self.persist = persist

    @abstractmethod
    def execute(self, **kwargs) -> Any:
        """Execute the operation.

        Returns:
            Operation-specific result
        """
        pass

    def save_result(self, data: Any) -> None:
        """Persist plain result data when persistence is enabled."""
        if not self.persist:
            return
        self.processor.state_manager.save_operation_result(self.name, data)
        logger.debug(f"Operation '{self.name}' result persisted")
