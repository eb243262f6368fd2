"""Source discovery and parsing of patch script trees."""
