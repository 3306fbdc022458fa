"""Infrastructure implementations of the domain's external collaborators."""
