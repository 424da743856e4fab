"""Feature modules: data, invoicing, fx, rendering and email."""
