"""Collaborator layer: models, research, markdown, storage/document/image providers."""
