"""Route modules mounted under the API prefix."""
