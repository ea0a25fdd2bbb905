"""Core data types: matrix, color scale, dendrogram."""
