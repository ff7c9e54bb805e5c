"""Static include builder for markup trees."""
