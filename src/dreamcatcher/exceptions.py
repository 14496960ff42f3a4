"""Exception hierarchy for dreamcatcher.

Only programmer and configuration defects are raised. Expected outcomes of
driving a machine are plain values instead:

- a rejected move returns the original, unchanged instance
- a failed traversal returns a ``NotReachable`` value

Example:
    ```python
    from dreamcatcher.exceptions import ConfigurationError, DreamcatcherError

    try:
        move(instance, "nowhere")
    except ConfigurationError as e:
        logger.error(f"Bad machine: {e}")
        if e.context:
            logger.error(f"Context: {e.context}")
    ```
"""

from typing import Any, Dict


class DreamcatcherError(Exception):
    """Base exception for all dreamcatcher errors.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context

    Args:
        message: Human-readable error message
        context: Optional dictionary with error context (states, functions, ...)
        details: Alternative to context (both are supported)

    Example:
        ```python
        error = DreamcatcherError(
            "Operation failed",
            context={"state": "opened", "target": "closed"}
        )
        str(error)
        # 'Operation failed'
        error.context
        # {'state': 'opened', 'target': 'closed'}
        ```
    """

    def __init__(
        self,
        message: str,
        context: Dict[str, Any] | None = None,
        details: Dict[str, Any] | None = None,
    ):
        """Initialize the exception with optional context.

        Args:
            message: Error message
            context: Optional context dictionary
            details: Optional details dictionary (takes precedence over context)
        """
        super().__init__(message)
        self.context = details or context or {}
        self.details = self.context


class ConfigurationError(DreamcatcherError):
    """Raised when a machine is misconfigured or misused.

    Common scenarios include:
    - Moving to a state the definition does not know
    - Moving along an edge with no direct transition
    - Mutating a definition that instances already share
    - Acting on an instance that was never given life (or was killed)
    - Invalid machine files or engine settings

    Example:
        ```python
        raise ConfigurationError(
            "No transition from 'opened' to 'locked'",
            context={"from_state": "opened", "to_state": "locked"}
        )
        ```
    """

    pass


class ContractViolation(DreamcatcherError):
    """Raised when a transition function breaks its contract.

    Transition functions must return a ``MachineInstance`` bound to a
    definition. Anything else is a bug in the function, not a runtime
    condition.
    """

    def __init__(
        self,
        from_state: Any,
        to_state: Any,
        message: str,
        details: Dict[str, Any] | None = None,
    ):
        super().__init__(
            f"Transition from '{from_state}' to '{to_state}' violated its contract: {message}",
            context=details,
        )
        self.from_state = from_state
        self.to_state = to_state


__all__ = [
    "DreamcatcherError",
    "ConfigurationError",
    "ContractViolation",
]
