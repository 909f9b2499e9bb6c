"""REST transport of the resource API."""
