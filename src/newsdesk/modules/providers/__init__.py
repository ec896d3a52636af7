"""External collaborators: persistence, document publishing, images, liveness."""
