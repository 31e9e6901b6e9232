"""vidcat: video test asset catalog builder, search, and scoring toolkit."""
