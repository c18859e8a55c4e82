"""Services: scheduling engine, notifications and background jobs."""
