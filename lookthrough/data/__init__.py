"""Static catalogs, resolver caches and the optional network client."""
