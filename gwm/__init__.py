"""gwm - manage git worktrees on top of a shared bare repository."""
