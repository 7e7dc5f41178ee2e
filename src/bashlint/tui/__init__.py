"""Terminal UI for reviewing lint results."""
