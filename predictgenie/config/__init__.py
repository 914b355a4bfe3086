"""Runtime configuration loaded from the environment."""
