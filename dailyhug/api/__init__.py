"""HTTP layer: Flask blueprints, access-control decorators and error handlers."""
