"""Core resolution engine: manifests, git sources, resolvers and lockfiles."""
