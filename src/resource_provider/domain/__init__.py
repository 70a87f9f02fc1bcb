"""Domain layer - waiter state machine and ports."""
