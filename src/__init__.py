"""Song library service package."""
