"""Web converter: upload, preview and download session logs."""
