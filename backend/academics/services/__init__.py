"""Read-only directory lookups and designation maintenance used by the OD workflow."""
