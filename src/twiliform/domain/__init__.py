"""Domain layer: the declared resource model and the reconciliation error taxonomy."""
