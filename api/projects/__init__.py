"""Portfolio projects: listing, image upload, tag handling."""
