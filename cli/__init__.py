"""stationfeed command-line interface."""
