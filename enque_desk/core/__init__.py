"""Settings, errors, logging, sessions and workspace resolution."""
