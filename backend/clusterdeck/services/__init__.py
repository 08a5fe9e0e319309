"""Service layer sitting between the HTTP routers and the repositories."""
