"""Journal services: entry store, tag catalog, analytics, export and storage bootstrap."""
