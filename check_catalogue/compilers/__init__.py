"""Kind-specific compilers invoked by the catalogue dispatcher."""
