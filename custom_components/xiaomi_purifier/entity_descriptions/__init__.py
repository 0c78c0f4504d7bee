"""Entity descriptions for purifier platforms."""
