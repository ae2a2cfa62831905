"""Remote release catalogs."""
