"""Identity bounded context: resolves which shop a storefront request belongs to."""
