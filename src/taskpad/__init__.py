"""Console task-list client: remote sync, local trash, debounced autosave, batch selection."""
