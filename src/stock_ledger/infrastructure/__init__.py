"""Infrastructure layer - storage backends."""
