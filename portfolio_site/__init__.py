"""Portfolio site back-office service package."""
