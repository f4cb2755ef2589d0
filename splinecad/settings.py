# splinecad global settings

# Degree used when a caller does not supply one
DEFAULT_DEGREE = 3

# Knot removal distance check (model units)
KNOT_REMOVAL_TOLERANCE = 1e-4

# Point / control point equality
POINT_TOLERANCE = 1e-9

# Slack allowed when checking a parameter against the curve domain
PARAMETRIC_TOLERANCE = 1e-12

# Spacing between consecutive knots of a freshly built periodic curve
PERIODIC_KNOT_SPACING = 1.0
