"""Color mapping of ordered matrices."""
