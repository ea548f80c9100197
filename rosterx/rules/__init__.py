"""Pure scheduling rules: recurrence expansion and conflict checks."""
