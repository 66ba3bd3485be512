"""Use cases orchestrating domain objects for the writer."""
