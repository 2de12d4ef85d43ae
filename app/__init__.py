"""MovieGrid: browse OMDb search results in a sorted, filterable grid."""

__version__ = "1.0.0"
