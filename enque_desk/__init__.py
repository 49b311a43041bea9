"""Backend-for-frontend for the Enque help desk."""
