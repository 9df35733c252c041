"""Domain layer: wrapper entities and naming rules, free of host facilities."""
