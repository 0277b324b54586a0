"""Planning core: catalogs, scheduling, and progressive overload."""
