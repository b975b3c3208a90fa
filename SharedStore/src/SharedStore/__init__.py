"""Record stores, failover repository and shared HTTP plumbing."""
