"""Editorial brain: discovery, drafting, compliance and publication."""
