"""Document model, migration, navigation and search."""
