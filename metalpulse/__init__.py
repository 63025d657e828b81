"""MetalPulse: precious-metals news filtering and post publishing bot."""
