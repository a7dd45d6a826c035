"""Store operations over the ORM models, grouped per entity."""
