"""REST API for reqlint."""
