"""Storage backends shared by the RFQ components."""
