"""Job creation for connection syncs, stream refreshes and connection resets."""
