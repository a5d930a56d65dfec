"""Channel data: domain model, gateway interface and the health service."""
