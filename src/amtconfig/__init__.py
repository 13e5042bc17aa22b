"""Tenant-scoped AMT provisioning configuration store with encrypted profile export."""
