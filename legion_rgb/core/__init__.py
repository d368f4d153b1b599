"""Core (non-UI) lighting logic: device driver, effects and effect manager."""
