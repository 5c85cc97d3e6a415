"""Feature modules: one package per progression concern."""
