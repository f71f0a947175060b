"""Storage infrastructure backed by SQLModel."""
