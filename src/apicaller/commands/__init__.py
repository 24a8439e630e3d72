"""Built-in sub-command groups registered on the root :data:`~apicaller.app.app`."""
