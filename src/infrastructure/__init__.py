"""Infrastructure Layer.

Adapters implementing domain ports: in-memory session storage and raster I/O.
"""
