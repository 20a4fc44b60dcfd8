"""Coverage Bounded Context.

Responsible for tracking which parts of a survey area have been walked:
- Value Objects: Point, Voxel, Boundary, CoverageStats, PaintResult, GapInfo
- Entities: CoverageSession (aggregate root)
- Services: expected_voxel_count, find_gaps, find_nearest_gap
- Ports: CoverageSessionPort
"""
