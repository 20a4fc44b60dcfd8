"""Terrain Bounded Context.

Responsible for surface elevation and geographic reference:
- Value Objects: ElevationSample, GridBounds, SlopeVector, GeoPoint, GeoPolygon
- Entities: ElevationGrid (IDW interpolation, slope, DEM raster)
- Services: geodesic_distance, latlon_to_local_meters, local_meters_to_latlon
- Ports: DemWriter
"""
