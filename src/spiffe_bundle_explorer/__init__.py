"""SPIFFE trust bundle explorer."""
