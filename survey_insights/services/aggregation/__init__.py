"""Independent reducers over a set of normalized responses.

Each module exposes pure functions that take normalized responses (and, for
time-windowed metrics, an explicit ``now``) and return report schema objects.
No reducer depends on another's output.
"""
