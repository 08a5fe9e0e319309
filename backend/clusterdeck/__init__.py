"""ClusterDeck backend: external linkouts and self-registration roles."""
