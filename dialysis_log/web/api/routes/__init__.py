"""Web API routers."""
