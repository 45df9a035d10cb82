"""inkflow: stroke synthesis and 2-D path geometry for vector drawing surfaces.

This package turns raw pointer samples (position, pressure, tilt, rotation,
timestamp) into renderable stroke geometry, and manipulates paths with
simplification, smoothing, outlining, boolean composition and procedural
shapes. The host application owns windows, tools, undo and file formats; it
feeds events and brush profiles in and consumes paths.

Architecture layers (strict one-way dependency):
    scripts/ → inkflow/stroke_engine/ → inkflow/path_ops/ → inkflow/utils/

Key invariants:
    - Geometry in canvas pixels, timestamps in milliseconds
    - Path operations never mutate their input; every result is a new Path
    - Randomness only through an injected numpy Generator (seedable)
    - YAML-only configs validated by pydantic schemas
    - Colors are RGBA floats in [0,1]
"""

__version__ = "0.4.0"
