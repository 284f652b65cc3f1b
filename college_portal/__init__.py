"""College portal notification service package."""
