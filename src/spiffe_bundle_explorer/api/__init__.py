"""REST API for the bundle explorer."""
