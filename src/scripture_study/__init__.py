"""Scripture study backend: entity-linked verses over a pluggable SQL store."""
