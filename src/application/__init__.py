"""Application Layer.

Application services that orchestrate domain objects for downstream
consumers, such as report and mesh export.
"""
