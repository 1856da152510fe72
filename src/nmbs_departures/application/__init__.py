"""Application layer - protocol logic on top of the domain ports."""
