"""Pure domain models for the inventory catalog."""
