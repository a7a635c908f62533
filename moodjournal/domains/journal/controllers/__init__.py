"""Journal JSON API blueprints."""
