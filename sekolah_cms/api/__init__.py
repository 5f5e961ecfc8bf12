"""HTTP layer: admin JSON API, public HTML pages, login."""
