"""Customer order lookup service for a Shopify store."""
