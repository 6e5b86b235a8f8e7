"""Core installation engine: backups, linking, processes and the task pipeline."""
