"""Template trees shipped with pmv. Each subdirectory is one template."""
